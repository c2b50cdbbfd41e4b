"""
Process Bridge: run external commands from sequences of strings.

Every variant follows the same steps:
    1. Validate the argument shapes
    2. Convert sequence elements to Python strings
    3. Launch the process from an argv vector (never through a shell)
    4. Drain stdout and stderr to completion and wait for exit
    5. Package exit code, stdout and stderr as an ExecResult

No escaping or quoting is done at any step: each string reaches the
process exactly as given. Callers must sanitize untrusted data themselves.

A non-zero exit code is data, not an error. Spawn failures (missing
binary, permission denied) propagate as OSError.

Without a timeout a process that never exits blocks the caller forever.
"""

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from iobridge.conversions import to_environment, to_strings
from iobridge.errors import ArgumentShapeError, ExecTimeoutError, TemplateFormatError
from iobridge.values import Value, IntValue, StringValue, RecordValue, ppr

logger = logging.getLogger(__name__)

EXIT_VALUE = "exitValue"
STDOUT = "stdout"
STDERR = "stderr"

_SPECIFIER = re.compile(r"%(?:([0-9]+)\$)?([-#+ 0,(]*)([0-9]+)?(?:\.([0-9]+))?(.)", re.DOTALL)


@dataclass(frozen=True)
class ExecResult:
    """
    Outcome of one process run.

    Properties:
        exit_value: Process exit code (negative if killed by a signal)
        stdout: Full standard output text
        stderr: Full standard error text
    """

    exit_value: int
    stdout: str
    stderr: str

    def to_record(self) -> RecordValue:
        """Record with fields in the fixed order exitValue, stdout, stderr."""
        return RecordValue((
            (EXIT_VALUE, IntValue(self.exit_value)),
            (STDOUT, StringValue(self.stdout)),
            (STDERR, StringValue(self.stderr)),
        ))


def _pad(text: str, flags: str, width: Optional[str]) -> str:
    if width is None:
        return text
    if "-" in flags:
        return text.ljust(int(width))
    return text.rjust(int(width))


def format_token(template: str, params: Sequence[str]) -> str:
    """
    Fill one command token from positional parameters.

    Specifiers have the form %[index$][flags][width][.precision]conversion:
        %s, %S     next parameter (%S upper-cases it)
        %<n>$s     the n-th parameter (1-based)
        %%         a literal percent sign
        %n         the platform line separator

    For %s and %S, precision truncates the parameter and width pads it on
    the left, or on the right with the '-' flag. No other flag applies to
    strings.

    Parameters the template does not use are ignored.

    Raises:
        TemplateFormatError: On a missing parameter, an unknown
            conversion, a flag or precision the conversion does not
            accept, or a dangling '%'
    """
    out: List[str] = []
    ordinary = 0
    i = 0
    while i < len(template):
        j = template.find("%", i)
        if j < 0:
            out.append(template[i:])
            break
        out.append(template[i:j])
        m = _SPECIFIER.match(template, j)
        if m is None:
            raise TemplateFormatError(f"Dangling '%' at end of {template!r}")
        index, flags, width, precision, conversion = m.groups()
        spec = m.group(0)
        if conversion not in ("s", "S", "%", "n"):
            raise TemplateFormatError(f"Unknown conversion '%{conversion}' in {template!r}")
        if flags.replace("-", ""):
            raise TemplateFormatError(f"Flags '{flags}' not allowed in '{spec}' in {template!r}")
        if "-" in flags and width is None:
            raise TemplateFormatError(f"'-' needs a width in '{spec}' in {template!r}")
        if conversion == "n":
            if index is not None or flags or width is not None or precision is not None:
                raise TemplateFormatError(f"'%n' takes no modifiers, got '{spec}' in {template!r}")
            out.append(os.linesep)
        elif conversion == "%":
            if index is not None or precision is not None:
                raise TemplateFormatError(f"'%%' takes no index or precision, got '{spec}' in {template!r}")
            out.append(_pad("%", flags, width))
        else:
            if index is not None:
                k = int(index) - 1
            else:
                k = ordinary
                ordinary += 1
            if k < 0 or k >= len(params):
                raise TemplateFormatError(f"Missing parameter for '{spec}' in {template!r}")
            text = params[k]
            if precision is not None:
                text = text[:int(precision)]
            if conversion == "S":
                text = text.upper()
            out.append(_pad(text, flags, width))
        i = m.end()
    return "".join(out)


def build_command(parameter: Value, operator: str) -> List[str]:
    command = to_strings(parameter, operator)
    if not command:
        raise ArgumentShapeError(operator, "non-empty sequence", ppr(parameter))
    return command


def build_template_command(template: Value, parameters: Value, operator: str) -> List[str]:
    """Substitute the parameters into every token of the template."""
    tokens = to_strings(template, operator)
    params = to_strings(parameters, operator)
    if not tokens:
        raise ArgumentShapeError(operator, "non-empty sequence", ppr(template))
    return [format_token(token, params) for token in tokens]


def run_process(
    command: List[str],
    env_overrides: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    encoding: str = "utf-8",
) -> ExecResult:
    """
    Run a command and capture its output.

    Args:
        command: argv vector; command[0] is the program
        env_overrides: Variables merged over the inherited environment
            (same-named variables are replaced, the rest stay visible)
        timeout: Seconds to wait; None waits forever
        encoding: Encoding used to decode both output streams

    Returns:
        ExecResult with the exit code and both streams in full

    Raises:
        OSError: If the process cannot be launched
        ExecTimeoutError: If the timeout elapses (the process is killed)
    """
    env: Optional[Dict[str, str]] = None
    if env_overrides is not None:
        env = os.environ.copy()
        env.update(env_overrides)

    logger.debug("Launching %s", command)
    try:
        completed = subprocess.run(
            command,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise ExecTimeoutError(command, timeout) from e

    logger.debug("Process %s exited with %d", command[0], completed.returncode)
    return ExecResult(
        exit_value=completed.returncode,
        stdout=completed.stdout.decode(encoding, errors="replace"),
        stderr=completed.stderr.decode(encoding, errors="replace"),
    )


def exec_command(parameter: Value, timeout=None, encoding="utf-8", operator="IOExec") -> ExecResult:
    return run_process(build_command(parameter, operator), timeout=timeout, encoding=encoding)


def env_exec_command(env: Value, parameter: Value, timeout=None, encoding="utf-8",
                     operator="IOEnvExec") -> ExecResult:
    overrides = to_environment(env, operator)
    command = build_command(parameter, operator)
    return run_process(command, overrides, timeout=timeout, encoding=encoding)


def exec_template(template: Value, parameters: Value, timeout=None, encoding="utf-8",
                  operator="IOExecTemplate") -> ExecResult:
    command = build_template_command(template, parameters, operator)
    return run_process(command, timeout=timeout, encoding=encoding)


def env_exec_template(env: Value, template: Value, parameters: Value, timeout=None,
                      encoding="utf-8", operator="IOEnvExecTemplate") -> ExecResult:
    overrides = to_environment(env, operator)
    command = build_template_command(template, parameters, operator)
    return run_process(command, overrides, timeout=timeout, encoding=encoding)
