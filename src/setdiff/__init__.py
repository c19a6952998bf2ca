"""
setdiff: set algebra over the lines of text files.

    echo "a.txt and b.txt" | setdiff

Each file becomes a set of lines (or of selected '|' delimited columns)
and the expression combines them left to right with 'and', 'or' and
'not'. See evaluator.py for the evaluation rules.
"""

__version__ = "0.3.0"

from setdiff.errors import SetDiffError
from setdiff.config import Configuration, ConfigurationError
from setdiff.expressions import ExpressionSyntaxError, Operator
from setdiff.lineset import LineSet, OperandReadError, load_line_set
from setdiff.operators import UnknownOperatorError, difference, intersect, union
from setdiff.diagnostics import EmptyOperandWarning
from setdiff.evaluator import LeftFoldEvaluator, evaluate, evaluate_expression

__all__ = [
    "__version__",
    "SetDiffError",
    "Configuration",
    "ConfigurationError",
    "ExpressionSyntaxError",
    "Operator",
    "LineSet",
    "OperandReadError",
    "load_line_set",
    "UnknownOperatorError",
    "EmptyOperandWarning",
    "union",
    "intersect",
    "difference",
    "LeftFoldEvaluator",
    "evaluate",
    "evaluate_expression",
]
