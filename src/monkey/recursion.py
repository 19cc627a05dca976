"""
Host recursion limit for the recursive-descent parser and the evaluator.

A single Monkey call costs a dozen or so Python frames, and every level of
expression nesting a couple more, so the interpreter default of 1000 frames
is far too tight for ordinary programs.
"""

import sys
from contextlib import contextmanager
from typing import Iterator

HOST_RECURSION_LIMIT = 10000


@contextmanager
def raised_recursion_limit(limit: int = HOST_RECURSION_LIMIT) -> Iterator[int]:
    """Raise the recursion limit to at least `limit` for the body, then restore it."""
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield sys.getrecursionlimit()
    finally:
        sys.setrecursionlimit(previous)
