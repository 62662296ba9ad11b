"""
  mscheme Reader, Lexer and Parser

- Streaming, lazy tokenizing
- Builds heap-allocated expression trees:

    - integers    -> Integer (signed 64-bit)
    - #t / #f     -> Boolean
    - symbols     -> Symbol
    - () / lists  -> Nil / chains of Pair
    - (a . b)     -> improper list ending in b
    - 'x          -> (quote x)
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from mscheme import SExpression
from mscheme.errors import SchemeSyntaxError
from mscheme.types.heap import Heap
from mscheme.types.nil import Nil
from mscheme.types.symbol import Symbol
from mscheme.types.values import INT64_MAX, INT64_MIN, Boolean, Integer, Pair


TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<quote>')"  # '
    r"|(?P<dot>\.)"  # dotted-pair marker
    r"|(?P<integer>[+-]?[0-9]+)"  # sign only when a digit follows
    r"|(?P<atom>[^\s()'.]+)"  # symbols and booleans
    r")"
)

BOOLEANS: dict[str, bool] = {"#t": True, "#f": False}


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        m = TOKEN_RE.match(source, pos)
        if m is None:
            # only trailing whitespace is left
            if source[pos:].isspace():
                return
            raise SchemeSyntaxError(f"Unexpected char at {pos}: {source[pos]!r}")
        pos = m.end()
        kind = m.lastgroup
        text = m.group(kind)
        if kind == "atom":
            if text in BOOLEANS:
                kind = "boolean"
            elif "#" in text or '"' in text or not text.isprintable():
                raise SchemeSyntaxError(f"Illegal character {text}")
            else:
                kind = "symbol"
        yield kind, text


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]], heap: Heap):
        self.tokens = iter(token_iter)
        self.heap = heap
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def at_end(self) -> bool:
        return self.peek()[0] is None

    def parse_expr(self) -> SExpression:
        tok_type, tok_val = self.advance()
        if tok_type is None:
            raise SchemeSyntaxError("No token, but expected")

        if tok_type == "integer":
            value = int(tok_val)
            if not INT64_MIN <= value <= INT64_MAX:
                raise SchemeSyntaxError(f"Integer literal out of range: {tok_val}")
            return self.heap.make(Integer, value)

        if tok_type == "boolean":
            return self.heap.make(Boolean, BOOLEANS[tok_val])

        if tok_type == "symbol":
            return self.heap.make(Symbol, tok_val)

        # 'x => (quote x)
        if tok_type == "quote":
            quoted = self.parse_expr()
            return self.heap.make(
                Pair, self.heap.make(Symbol, "quote"), self.heap.make(Pair, quoted, Nil)
            )

        if tok_type == "lparen":
            return self._parse_list()

        if tok_type == "rparen":
            raise SchemeSyntaxError("Close bracket unexpected")
        if tok_type == "dot":
            raise SchemeSyntaxError("Dot unexpected")
        raise SchemeSyntaxError(f"Unknown token: {tok_type} {tok_val}")

    def _parse_list(self) -> SExpression:
        """Parse the rest of a list whose '(' was already consumed."""
        items: list[SExpression] = []
        tail: SExpression = Nil
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                raise SchemeSyntaxError("Unmatched '('")
            if tok_type == "rparen":
                self.advance()
                break
            if tok_type == "dot" and items:
                self.advance()
                tail = self.parse_expr()
                if self.peek()[0] != "rparen":
                    raise SchemeSyntaxError("Close bracket expected")
                self.advance()
                break
            items.append(self.parse_expr())

        result = tail
        for item in reversed(items):
            result = self.heap.make(Pair, item, result)
        return result

    def parse_all(self) -> Iterator[SExpression]:
        while not self.at_end():
            yield self.parse_expr()


def read(source: str, heap: Heap) -> SExpression:
    """Parse exactly one expression from `source`; trailing tokens are an error."""
    stream = TokenStream(lex(source), heap)
    expr = stream.parse_expr()
    if not stream.at_end():
        raise SchemeSyntaxError("Unexpected tokens")
    return expr
