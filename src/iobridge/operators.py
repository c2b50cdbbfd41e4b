"""
Evaluator-facing IO operators.

Each operator takes already-built values and returns a value or raises
an EvalError. The evaluator can call the methods directly or dispatch by
operator identifier:

    ops = IOOperators(IOContext.create())
    result = ops.call("IOExec", TupleValue.of(StringValue("echo"), StringValue("hi")))
    result.get("stdout")  # StringValue("hi\\n")

Operators:
    IODeserialize(path, compress)              native stream -> value
    IOSerialize(value, path, compress)         value -> native stream, TRUE
    Serialize(value, path, type, options)      via registry; FALSE if no such backend
    Deserialize(path, type, options)           via registry; FALSE if no such backend
    IOEnv                                      environment snapshot record
    IOExec(cmd)                                run cmd
    IOEnvExec(env, cmd)                        run cmd with env overrides
    IOExecTemplate(template, params)           run template filled from params
    IOEnvExecTemplate(env, template, params)   both of the above
    atoi(s)                                    base-10 string -> integer
"""

import logging
import re
from typing import Callable, Dict, List

from iobridge.context import IOContext
from iobridge.conversions import expect_bool, expect_record, expect_string
from iobridge import process
from iobridge.errors import ParseError
from iobridge.stream import read_value, write_value
from iobridge.values import (
    Value,
    IntValue,
    StringValue,
    RecordValue,
    TRUE,
    FALSE,
    INT_MIN,
    INT_MAX,
    ppr,
)

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def atoi(v: Value) -> IntValue:
    """
    Parse a base-10 integer.

    Accepts an optional sign followed by ASCII digits only, within the
    evaluator's integer range. Anything else (including the empty string
    and surrounding whitespace) raises ParseError.
    """
    if isinstance(v, StringValue) and _DECIMAL.fullmatch(v.val):
        i = int(v.val)
        if INT_MIN <= i <= INT_MAX:
            return IntValue(i)
    raise ParseError("atoi", "string", ppr(v))


class IOOperators:
    """IO operators bound to one IOContext."""

    def __init__(self, context: IOContext):
        self.context = context
        self._table: Dict[str, Callable[..., Value]] = {
            "IODeserialize": self.io_deserialize,
            "IOSerialize": self.io_serialize,
            "Serialize": self.serialize,
            "Deserialize": self.deserialize,
            "IOEnv": self.io_env,
            "IOExec": self.io_exec,
            "IOEnvExec": self.io_env_exec,
            "IOExecTemplate": self.io_exec_template,
            "IOEnvExecTemplate": self.io_env_exec_template,
            "atoi": self.atoi,
        }

    def names(self) -> List[str]:
        return sorted(self._table)

    def call(self, name: str, *args: Value) -> Value:
        """
        Invoke an operator by identifier.

        Raises:
            KeyError: If no operator has that name
        """
        try:
            op = self._table[name]
        except KeyError:
            raise KeyError(f"Unknown IO operator: {name}") from None
        logger.debug("Calling %s with %d argument(s)", name, len(args))
        return op(*args)

    # Serialization

    def io_deserialize(self, path: Value, compress: Value) -> Value:
        return read_value(
            expect_string(path, "IODeserialize"),
            compress=expect_bool(compress, "IODeserialize"),
        )

    def io_serialize(self, value: Value, path: Value, compress: Value) -> Value:
        write_value(
            value,
            expect_string(path, "IOSerialize"),
            compress=expect_bool(compress, "IOSerialize"),
        )
        return TRUE

    def serialize(self, value: Value, path: Value, serializer: Value, options: Value) -> Value:
        ok = self.context.registry.serialize(
            value,
            expect_string(path, "Serialize"),
            expect_string(serializer, "Serialize"),
            expect_record(options, "Serialize"),
        )
        return TRUE if ok else FALSE

    def deserialize(self, path: Value, serializer: Value, options: Value) -> Value:
        """
        Deserialize through the named backend.

        Returns FALSE when no backend matches, not an error. Callers must
        check for it; see SerializerRegistry.deserialize for the typed result.
        """
        result = self.context.registry.deserialize(
            expect_string(path, "Deserialize"),
            expect_string(serializer, "Deserialize"),
            expect_record(options, "Deserialize"),
        )
        if not result.found:
            return FALSE
        return result.value

    # Environment

    def io_env(self) -> RecordValue:
        return self.context.environment

    # Processes

    def io_exec(self, parameter: Value) -> RecordValue:
        return process.exec_command(parameter, **self._exec_kwargs()).to_record()

    def io_env_exec(self, env: Value, parameter: Value) -> RecordValue:
        return process.env_exec_command(env, parameter, **self._exec_kwargs()).to_record()

    def io_exec_template(self, template: Value, parameters: Value) -> RecordValue:
        return process.exec_template(template, parameters, **self._exec_kwargs()).to_record()

    def io_env_exec_template(self, env: Value, template: Value, parameters: Value) -> RecordValue:
        return process.env_exec_template(env, template, parameters, **self._exec_kwargs()).to_record()

    def _exec_kwargs(self) -> Dict[str, object]:
        settings = self.context.settings
        return {"timeout": settings.exec_timeout, "encoding": settings.encoding}

    # Parsing

    def atoi(self, v: Value) -> IntValue:
        return atoi(v)
