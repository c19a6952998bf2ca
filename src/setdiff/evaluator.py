"""
Expression evaluation: a strict left-to-right fold.

    a.txt and b.txt or c.txt   ==   (a.txt AND b.txt) OR c.txt

There is no operator precedence and no parenthesization. The evaluator
is a three-phase state machine:

    EXPECT_FIRST_OPERAND    --FILE-->      EXPECT_OPERATOR_OR_DONE
    EXPECT_OPERATOR_OR_DONE --OPERATOR-->  EXPECT_SECOND_OPERAND
    EXPECT_SECOND_OPERAND   --FILE-->      EXPECT_OPERATOR_OR_DONE  (operator applied)

The stream may only end in EXPECT_OPERATOR_OR_DONE. The first file is
keyed with the left-hand columns, every later file with the right-hand
columns. Any fatal error discards the partial result.

LeftFoldEvaluator is one implementation of the Evaluator protocol; a
precedence-aware evaluator could replace it without touching the set
operators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional, Protocol, Sequence, Union

from setdiff.config import Configuration
from setdiff.diagnostics import Diagnostics
from setdiff.expressions import (
    ExpressionSyntaxError,
    ExpressionToken,
    FilenameToken,
    Operator,
    OperatorToken,
    tokenize,
)
from setdiff.lineset import LineSet, load_line_set_file, looks_like_text_file
from setdiff.operators import apply_operator

LineSetLoader = Callable[[str, Sequence[int], Configuration], LineSet]


class EvaluationPhase(Enum):
    EXPECT_FIRST_OPERAND = "expect_first_operand"
    EXPECT_OPERATOR_OR_DONE = "expect_operator_or_done"
    EXPECT_SECOND_OPERAND = "expect_second_operand"


@dataclass
class EvaluationState:
    """
    Mutable state of one fold.

    Properties:
        accumulator: result so far (replaced, never merged into)
        pending_operator: operator waiting for its right operand
        phase: current state machine phase
    """

    accumulator: LineSet = field(default_factory=LineSet)
    pending_operator: Optional[Operator] = None
    phase: EvaluationPhase = EvaluationPhase.EXPECT_FIRST_OPERAND


class Evaluator(Protocol):
    def evaluate(self, tokens: Iterable[ExpressionToken]) -> LineSet:
        ...


class LeftFoldEvaluator:
    """
    Folds a token stream left to right into a single LineSet.

    Args:
        config: run configuration
        loader: callable(path, columns, config) -> LineSet; defaults to
            reading the file from disk
        diagnostics: sink for traces and once-per-run warnings
    """

    def __init__(
        self,
        config: Configuration,
        loader: Optional[LineSetLoader] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.config = config
        self.loader = loader or load_line_set_file
        self.diagnostics = diagnostics or Diagnostics()

    def evaluate(self, tokens: Iterable[ExpressionToken]) -> LineSet:
        """
        Evaluate a token stream.

        Raises:
            ExpressionSyntaxError: on a malformed or incomplete expression
            OperandReadError: if an operand file cannot be read
        """
        state = EvaluationState()
        last_token: Optional[ExpressionToken] = None

        for token in tokens:
            last_token = token
            if isinstance(token, OperatorToken):
                self._on_operator(state, token)
            elif isinstance(token, FilenameToken):
                self._on_filename(state, token)
            else:
                raise ExpressionSyntaxError(f"unrecognized token {token!r}")

        if state.phase is EvaluationPhase.EXPECT_FIRST_OPERAND:
            raise ExpressionSyntaxError("empty expression")
        if state.phase is EvaluationPhase.EXPECT_SECOND_OPERAND:
            raise ExpressionSyntaxError(
                f"incomplete expression: missing right hand operand of '{last_token.text}'",
                token=last_token.text,
                position=last_token.position,
            )
        return state.accumulator

    def _on_operator(self, state: EvaluationState, token: OperatorToken) -> None:
        self.diagnostics.trace("operator: '%s'", token.text)
        if state.phase is not EvaluationPhase.EXPECT_OPERATOR_OR_DONE:
            raise ExpressionSyntaxError(
                f"unexpected operator '{token.text}' at position {token.position}",
                token=token.text,
                position=token.position,
            )
        state.pending_operator = token.operator
        state.phase = EvaluationPhase.EXPECT_SECOND_OPERAND

    def _on_filename(self, state: EvaluationState, token: FilenameToken) -> None:
        self.diagnostics.trace("file: '%s'", token.path)
        if state.phase is EvaluationPhase.EXPECT_FIRST_OPERAND:
            state.accumulator = self.loader(token.path, self.config.columns_lhs, self.config)
            state.phase = EvaluationPhase.EXPECT_OPERATOR_OR_DONE
            return

        if state.phase is EvaluationPhase.EXPECT_OPERATOR_OR_DONE:
            raise ExpressionSyntaxError(
                f"expected an operator before '{token.text}' at position {token.position}",
                token=token.text,
                position=token.position,
            )

        rhs = self.loader(token.path, self.config.columns_rhs, self.config)
        state.accumulator = apply_operator(
            state.pending_operator, state.accumulator, rhs, self.config, self.diagnostics
        )
        state.pending_operator = None
        state.phase = EvaluationPhase.EXPECT_OPERATOR_OR_DONE


def evaluate(
    tokens: Iterable[ExpressionToken],
    config: Optional[Configuration] = None,
    loader: Optional[LineSetLoader] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> LineSet:
    """Fold an already tokenized expression with a LeftFoldEvaluator."""
    evaluator = LeftFoldEvaluator(config or Configuration(), loader=loader, diagnostics=diagnostics)
    return evaluator.evaluate(tokens)


def evaluate_expression(
    expression: Union[str, Iterable[str]],
    config: Optional[Configuration] = None,
    base_dir: Optional[str] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> LineSet:
    """
    Tokenize and evaluate an expression line against files on disk.

    Example:
        evaluate_expression("a.txt and b.txt")

    Raises:
        ExpressionSyntaxError: on a malformed expression
        OperandReadError: if an operand file cannot be read
    """
    tokens = tokenize(expression, looks_like_text_file, base_dir=base_dir)
    return evaluate(tokens, config=config, diagnostics=diagnostics)


__all__ = [
    "EvaluationPhase",
    "EvaluationState",
    "Evaluator",
    "LeftFoldEvaluator",
    "LineSetLoader",
    "evaluate",
    "evaluate_expression",
]
