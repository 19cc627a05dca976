"""
Built-in function registry for the Monkey interpreter.

Builtins are ordinary callables taking evaluated argument values and
returning a value. Misuse (wrong arity, wrong argument type) is reported
as an Error value, never raised.
"""

import sys
from typing import Dict, List, Optional, TextIO

from .values import (
    MonkeyObject, Builtin, BuiltinFunction,
    Integer, String, Array, Error, NULL,
)


def wrong_arity(got: int, want: int) -> Error:
    return Error(f"wrong number of arguments. got={got}, want={want}")


def unsupported_argument(name: str, arg: MonkeyObject) -> Error:
    return Error(f"argument to `{name}` not supported, got {arg.type()}")


class BuiltinRegistry:
    """
    Registry of built-in functions, looked up by name after the
    environment chain.

    `output` is where `puts` writes; when None, `sys.stdout` at call time.
    """

    def __init__(self, output: Optional[TextIO] = None):
        self.output = output
        self._functions: Dict[str, Builtin] = {}
        self._register_all()

    def get(self, name: str) -> Optional[Builtin]:
        """Look up a builtin by name."""
        return self._functions.get(name)

    def register(self, name: str, fn: BuiltinFunction) -> Builtin:
        """Register (or replace) a builtin."""
        builtin = Builtin(name, fn)
        self._functions[name] = builtin
        return builtin

    def names(self) -> List[str]:
        return sorted(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        self._register_sequence_functions()
        self._register_io_functions()

    # --- Strings and arrays ---

    def _register_sequence_functions(self) -> None:

        def _len(*args: MonkeyObject) -> MonkeyObject:
            if len(args) != 1:
                return wrong_arity(len(args), 1)
            arg = args[0]
            if isinstance(arg, String):
                return Integer(len(arg.value))
            return unsupported_argument("len", arg)

        def _first(*args: MonkeyObject) -> MonkeyObject:
            if len(args) != 1:
                return wrong_arity(len(args), 1)
            arr = args[0]
            if not isinstance(arr, Array):
                return unsupported_argument("first", arr)
            return arr.elements[0] if arr.elements else NULL

        def _last(*args: MonkeyObject) -> MonkeyObject:
            if len(args) != 1:
                return wrong_arity(len(args), 1)
            arr = args[0]
            if not isinstance(arr, Array):
                return unsupported_argument("last", arr)
            return arr.elements[-1] if arr.elements else NULL

        def _rest(*args: MonkeyObject) -> MonkeyObject:
            if len(args) != 1:
                return wrong_arity(len(args), 1)
            arr = args[0]
            if not isinstance(arr, Array):
                return unsupported_argument("rest", arr)
            if not arr.elements:
                return NULL
            return Array(arr.elements[1:])

        def _push(*args: MonkeyObject) -> MonkeyObject:
            if len(args) != 2:
                return wrong_arity(len(args), 2)
            arr, value = args
            if not isinstance(arr, Array):
                return unsupported_argument("push", arr)
            return Array(arr.elements + (value,))

        self.register("len", _len)
        self.register("first", _first)
        self.register("last", _last)
        self.register("rest", _rest)
        self.register("push", _push)

    # --- Output ---

    def _register_io_functions(self) -> None:

        def _puts(*args: MonkeyObject) -> MonkeyObject:
            out = self.output if self.output is not None else sys.stdout
            for arg in args:
                out.write(arg.inspect() + "\n")
            return NULL

        self.register("puts", _puts)


# Global default registry
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the shared default registry (writes `puts` output to stdout)."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry
