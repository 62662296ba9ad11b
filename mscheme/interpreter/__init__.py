from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Optional

from mscheme import SExpression
from mscheme.builtin.env_builtin import register
from mscheme.config import get_collect_on_error, get_recursion_limit
from mscheme.errors import SchemeError, SchemeRuntimeError, SchemeSyntaxError
from mscheme.evaluation.evaluator import evaluate
from mscheme.printer import render
from mscheme.reader.parser import read
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    """Result of one top-level evaluation: rendered text or a categorized error."""

    text: str
    error: Optional[SchemeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is None:
            return self.text
        return f"{self.error.label}: {self.error}"


class Interpreter:
    """
    One interpreter session: a heap and the global environment rooted in it.
    Every top-level evaluation is parsed, evaluated and rendered, and the heap
    is then collected rooted at the global environment.
    """

    def __init__(
        self,
        *,
        collect_on_error: bool | None = None,
        recursion_limit: int | None = None,
    ):
        self.collect_on_error = (
            get_collect_on_error() if collect_on_error is None else collect_on_error
        )
        limit = get_recursion_limit() if recursion_limit is None else recursion_limit
        if sys.getrecursionlimit() < limit:
            sys.setrecursionlimit(limit)

        self.heap: Heap = Heap()
        self.env: Environment = self.heap.make(Environment)
        register(self.env, self.heap)

    def run(self, line: str) -> str:
        """Parse and evaluate one expression; return its printed form."""
        try:
            expr = read(line, self.heap)
        except RecursionError:
            self._after_failure()
            raise SchemeSyntaxError("maximum nesting depth exceeded") from None
        except SchemeError:
            self._after_failure()
            raise
        return self.run_expression(expr)

    def run_expression(self, expr: SExpression) -> str:
        """Evaluate an already-built expression tree; return its printed form."""
        try:
            text = render(evaluate(expr, self.env, self.heap))
        except RecursionError:
            self._after_failure()
            raise SchemeRuntimeError("maximum recursion depth exceeded") from None
        except SchemeError:
            self._after_failure()
            raise
        self.heap.collect(self.env)
        return text

    def execute(self, line: str) -> Outcome:
        try:
            return Outcome(self.run(line))
        except SchemeError as e:
            logger.debug("evaluation of %r failed: %s", line, e)
            return Outcome("", e)

    def _after_failure(self) -> None:
        # Values allocated by a failed evaluation stay on the heap until the
        # next collection unless collect_on_error is set.
        if self.collect_on_error:
            self.heap.collect(self.env)

    def close(self) -> None:
        self.heap.clear()

    def __enter__(self) -> Interpreter:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
