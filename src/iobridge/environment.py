"""
Environment Snapshot: the host environment as an immutable record.

Captured once, when an IOContext is created, and never refreshed.
There is deliberately no single-variable lookup: callers key into the
record themselves, so no decision about unset variables is needed here.

Variable names are not restricted to identifier syntax (Windows has
names with parentheses); such fields are reachable by string key only.
"""

import os
from typing import Mapping, Optional

from iobridge.values import RecordValue, StringValue


def capture_environment(environ: Optional[Mapping[str, str]] = None) -> RecordValue:
    """
    Build a record from environment variables.

    Args:
        environ: Mapping to capture (defaults to os.environ); its
            iteration order is kept

    Returns:
        RecordValue with one String field per variable
    """
    if environ is None:
        environ = os.environ
    return RecordValue(tuple((name, StringValue(value)) for name, value in environ.items()))
