"""
IO Bridge Package

Host-side extension surface for a specification evaluator.

It lets evaluated expressions reach outside the evaluator in two ways:
    - Pluggable serializer backends (write a value to a file, read it back)
    - External process execution (argv in, exit code + stdout + stderr out)

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Expression language semantics
    - How the evaluator schedules operator calls

Operators receive already-built values and return new values.
No existing value is ever mutated.
"""

__version__ = "0.1.0"
