"""Base exception for setdiff.

Every fatal condition raised by the package derives from SetDiffError so
a caller (the CLI, or anything embedding the evaluator) can catch the
whole family at the process boundary. Specific errors live next to the
code that raises them.
"""


class SetDiffError(Exception):
    """Root of all setdiff errors."""
    pass
