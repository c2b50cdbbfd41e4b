"""
Typed evaluation errors raised by IO operators.

Shape errors abort the current evaluation step. File-system and spawn
failures are not wrapped: they surface as the built-in OSError subclasses.
"""


class EvalError(Exception):
    """Base class for errors reported back to the evaluator."""
    pass


class ArgumentShapeError(EvalError):
    """
    A supplied value does not match the expected kind or shape.

    Properties:
        operator: Operator identifier (e.g. "IOExec")
        expected: Description of the expected shape (e.g. "sequence")
        actual: Printable form of the offending value
    """

    def __init__(self, operator: str, expected: str, actual: str):
        self.operator = operator
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The argument of {operator} should be a {expected}, but instead it is:\n{actual}"
        )


class ParseError(ArgumentShapeError):
    """Malformed or out-of-range numeric text."""
    pass


class TemplateFormatError(EvalError):
    """Raised when a command template cannot be filled from its parameters."""
    pass


class ExecTimeoutError(EvalError):
    """Raised when a configured exec timeout elapses before the process exits."""

    def __init__(self, command, timeout: float):
        self.command = list(command)
        self.timeout = timeout
        super().__init__(f"Process {self.command} did not exit within {timeout} seconds")


class RegistryError(EvalError):
    """Raised when serializer backends cannot be registered."""
    pass


class ValueStreamError(OSError):
    """Raised when a file does not hold a well-formed value stream."""
    pass
