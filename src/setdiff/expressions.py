"""
Expression tokens for setdiff.

An expression is a single line such as

    new.lst not old.lst and holds.lst

split on whitespace into a flat stream of tokens. Every token is either
an operator keyword (and / or / not, any letter case) or the name of a
text file. There is no grouping and no precedence: the stream must have
the shape

    FILE (OPERATOR FILE)*

and is folded strictly left to right by the evaluator.

This module only classifies tokens. It does NOT load files and does NOT
apply operators; those belong to lineset.py and operators.py.
"""

import os
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Union

from setdiff.errors import SetDiffError


class ExpressionSyntaxError(SetDiffError):
    """
    Raised when the token stream does not form a valid expression.

    Covers unrecognized tokens, operators in operand position and
    expressions that end on an operator.
    """

    def __init__(self, message: str, token: Optional[str] = None, position: Optional[int] = None):
        super().__init__(message)
        self.token = token
        self.position = position


class Operator(Enum):
    """
    The three set operators an expression may use.

    Keyword matching is case-insensitive; the enum value is the
    canonical upper-case spelling.
    """

    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    @classmethod
    def from_keyword(cls, word: str) -> Optional["Operator"]:
        """Return the operator spelled by ``word``, or None."""
        try:
            return cls(word.upper())
        except ValueError:
            return None


class Token(ABC):
    """
    Base class for expression tokens.

    Structure only; tokens carry their source position so errors can
    point at the offending word.
    """
    pass


@dataclass(frozen=True)
class OperatorToken(Token):
    """
    An operator keyword as it appeared in the expression.

    Properties:
        operator: the recognized Operator
        text: the keyword as typed (e.g. "and", "NOT")
        position: 0-based index in the token stream
    """

    operator: Operator
    text: str
    position: int = 0


@dataclass(frozen=True)
class FilenameToken(Token):
    """
    A token naming an operand file.

    Properties:
        path: resolved path of the file
        text: the word as typed
        position: 0-based index in the token stream
    """

    path: str
    text: str
    position: int = 0


ExpressionToken = Union[OperatorToken, FilenameToken]


def split_expression(expression: Union[str, Iterable[str]]) -> List[str]:
    """Split an expression line (or a list of argv words) on whitespace."""
    if isinstance(expression, str):
        return expression.split()
    words: List[str] = []
    for part in expression:
        words.extend(part.split())
    return words


def tokenize(
    expression: Union[str, Iterable[str]],
    is_operand: Callable[[str], bool],
    base_dir: Optional[str] = None,
) -> Iterator[ExpressionToken]:
    """
    Classify the words of an expression, lazily.

    Words are classified in order and an unrecognized word raises only
    when it is reached, so a caller folding the stream sees errors in
    the same order it would have seen them reading left to right.

    Args:
        expression: the expression line, or a sequence of words
        is_operand: predicate telling whether a path names a usable
            text file (see lineset.looks_like_text_file)
        base_dir: directory relative paths resolve against
            (defaults to the current working directory)

    Yields:
        OperatorToken or FilenameToken

    Raises:
        ExpressionSyntaxError: on a word that is neither a keyword nor
            a usable file
    """
    for position, word in enumerate(split_expression(expression)):
        operator = Operator.from_keyword(word)
        if operator is not None:
            yield OperatorToken(operator=operator, text=word, position=position)
            continue

        path = word
        if base_dir is not None and not os.path.isabs(word):
            path = os.path.join(base_dir, word)

        if is_operand(path):
            yield FilenameToken(path=path, text=word, position=position)
            continue

        raise ExpressionSyntaxError(
            f"unrecognized token '{word}'", token=word, position=position
        )


__all__ = [
    "ExpressionSyntaxError",
    "Operator",
    "Token",
    "OperatorToken",
    "FilenameToken",
    "ExpressionToken",
    "split_expression",
    "tokenize",
]
