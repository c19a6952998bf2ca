"""
Run-scoped diagnostics.

Debug traces go to the 'setdiff' loggers at DEBUG. Non-fatal problems
are logged and issued through the warnings module, some of them only once per run so a
long expression over many empty files does not flood the log.
"""

import logging
import warnings
from typing import Optional


class EmptyOperandWarning(UserWarning):
    """An operator was applied with an empty left or right operand."""
    pass


class Diagnostics:
    """
    Diagnostic sink for one evaluation run.

    Create one per run; its once-only warnings reset with it.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or logging.getLogger("setdiff")
        self.empty_operand_reported = False

    def trace(self, msg: str, *args) -> None:
        self.log.debug(msg, *args)

    def empty_operand(self, operator_name: str, lhs_size: int, rhs_size: int) -> None:
        """Report an empty operand, at most once per run."""
        if self.empty_operand_reported:
            self.log.debug("empty operand for '%s' (already reported)", operator_name)
            return
        self.empty_operand_reported = True

        side = "left" if lhs_size == 0 else "right"
        if lhs_size == 0 and rhs_size == 0:
            side = "both"
        message = (
            f"empty operand ({side}) for operator '{operator_name}'; "
            f"result may be degenerate"
        )
        self.log.warning(message)
        warnings.warn(message, EmptyOperandWarning, stacklevel=3)


__all__ = ["Diagnostics", "EmptyOperandWarning"]
