"""Textual rendering of mscheme values."""

from __future__ import annotations

from mscheme import SchemeValue
from mscheme.errors import SchemeRuntimeError
from mscheme.types.lambda_fn import Procedure
from mscheme.types.nil import Nil
from mscheme.types.symbol import Symbol
from mscheme.types.values import Boolean, Integer, Pair

# Printed in place of a field that refers back to a pair being printed
SELF_REF = "{selfref}"


def render(value: SchemeValue) -> str:
    return _render(value, set())


def _render(value: SchemeValue, path: set[int]) -> str:
    if value is Nil:
        return "()"
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Boolean):
        return "#t" if value.value else "#f"
    if isinstance(value, Symbol):
        return value.name
    if isinstance(value, Pair):
        return _render_pair(value, path)
    if isinstance(value, Procedure):
        return value.tag
    raise SchemeRuntimeError(f"Unknown object {value!r}")


def _render_pair(pair: Pair, path: set[int]) -> str:
    # `path` holds the pairs currently being printed: the chain walked so far
    # plus every enclosing list.
    parts: list[str] = []
    walked: list[int] = []
    tail = None
    current = pair
    while True:
        path.add(id(current))
        walked.append(id(current))
        first = current.first
        if isinstance(first, Pair) and id(first) in path:
            parts.append(SELF_REF)
        else:
            parts.append(_render(first, path))
        nxt = current.second
        if nxt is Nil:
            break
        if isinstance(nxt, Pair):
            if id(nxt) in path:
                tail = SELF_REF
                break
            current = nxt
            continue
        tail = _render(nxt, path)
        break
    for key in walked:
        path.discard(key)

    text = " ".join(parts)
    if tail is not None:
        text += " . " + tail
    return f"({text})"
