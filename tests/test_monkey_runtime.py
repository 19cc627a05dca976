"""
Tests for the Monkey runtime object model (values, environments, builtins).
"""

import io

import pytest

from monkey.runtime import (
    ObjectType, HashKey, Integer, String, Boolean, Null, ReturnValue, Error,
    Array, Hash, Function, Builtin, TRUE, FALSE, NULL,
    native_bool_to_boolean, is_truthy, is_error, is_hashable,
    Environment, new_enclosed_environment,
    BuiltinRegistry, get_builtin_registry,
)
from monkey import parse


# --- Value Tests ---

class TestValues:
    """Test runtime values and their inspection text."""

    def test_integer(self):
        v = Integer(42)
        assert v.type() == ObjectType.INTEGER
        assert v.inspect() == "42"

    def test_negative_integer(self):
        assert Integer(-7).inspect() == "-7"

    def test_string_inspects_raw_text(self):
        v = String("hello world")
        assert v.type() == ObjectType.STRING
        assert v.inspect() == "hello world"

    def test_booleans(self):
        assert TRUE.inspect() == "true"
        assert FALSE.inspect() == "false"
        assert TRUE.type() == ObjectType.BOOLEAN

    def test_null(self):
        assert NULL.inspect() == "null"
        assert NULL.type() == ObjectType.NULL

    def test_error(self):
        err = Error("boom")
        assert err.type() == ObjectType.ERROR
        assert err.inspect() == "ERROR: boom"

    def test_return_value_inspects_inner_value(self):
        assert ReturnValue(Integer(3)).inspect() == "3"
        assert ReturnValue(Integer(3)).type() == ObjectType.RETURN_VALUE

    def test_array(self):
        arr = Array([Integer(1), String("two"), TRUE])
        assert arr.type() == ObjectType.ARRAY
        assert arr.inspect() == "[1, two, true]"
        assert isinstance(arr.elements, tuple)

    def test_empty_array(self):
        assert Array().inspect() == "[]"

    def test_builtin(self):
        b = Builtin("noop", lambda *args: NULL)
        assert b.type() == ObjectType.BUILTIN
        assert b.inspect() == "builtin function"

    def test_function_inspect(self):
        fn_lit = parse("fn(x, y) { x + y }").program.statements[0].expression
        fn = Function(fn_lit.parameters, fn_lit.body, Environment())
        assert fn.type() == ObjectType.FUNCTION
        assert fn.inspect() == "fn(x, y) {\n(x + y)\n}"

    def test_object_type_names(self):
        assert str(ObjectType.INTEGER) == "INTEGER"
        assert str(ObjectType.HASH) == "HASH"


class TestTruthiness:
    """Only NULL and FALSE are falsy."""

    @pytest.mark.parametrize("obj,expected", [
        (TRUE, True),
        (FALSE, False),
        (NULL, False),
        (Integer(0), True),
        (Integer(1), True),
        (String(""), True),
        (Array(), True),
    ])
    def test_is_truthy(self, obj, expected):
        assert is_truthy(obj) is expected

    def test_native_bool_returns_singletons(self):
        assert native_bool_to_boolean(True) is TRUE
        assert native_bool_to_boolean(False) is FALSE

    def test_is_error(self):
        assert is_error(Error("x"))
        assert not is_error(NULL)
        assert not is_error(None)


class TestHashKeys:
    """Test structural hash keys."""

    def test_equal_strings_have_equal_keys(self):
        hello1 = String("Hello World")
        hello2 = String("Hello World")
        diff = String("My name is johnny")
        assert hello1 is not hello2
        assert hello1.hash_key() == hello2.hash_key()
        assert hello1.hash_key() != diff.hash_key()

    def test_integer_key(self):
        assert Integer(7).hash_key() == HashKey(ObjectType.INTEGER, 7)

    def test_boolean_keys(self):
        assert TRUE.hash_key() == HashKey(ObjectType.BOOLEAN, 1)
        assert FALSE.hash_key() == HashKey(ObjectType.BOOLEAN, 0)

    def test_type_is_part_of_key(self):
        """Integer 1 and true do not collide."""
        assert Integer(1).hash_key() != TRUE.hash_key()

    def test_hashability(self):
        assert is_hashable(Integer(1))
        assert is_hashable(String("a"))
        assert is_hashable(TRUE)
        assert not is_hashable(NULL)
        assert not is_hashable(Array())
        assert not is_hashable(Hash())

    def test_hash_key_is_usable_in_sets(self):
        keys = {String("a").hash_key(), String("a").hash_key(), Integer(1).hash_key()}
        assert len(keys) == 2


class TestHash:
    """Test the Hash value."""

    def test_set_and_get(self):
        h = Hash()
        h.set(String("one"), Integer(1))
        assert h.get(String("one")) == Integer(1)
        assert h.get(String("two")) is None

    def test_get_by_hash_key(self):
        h = Hash()
        h.set(Integer(5), String("five"))
        assert h.get(HashKey(ObjectType.INTEGER, 5)) == String("five")

    def test_overwrite_keeps_position_and_takes_new_key(self):
        h = Hash()
        first_key = String("a")
        second_key = String("a")
        h.set(first_key, Integer(1))
        h.set(String("b"), Integer(2))
        h.set(second_key, Integer(3))
        assert len(h) == 2
        assert h.inspect() == "{a: 3, b: 2}"
        pair = h.pairs[first_key.hash_key()]
        assert pair.key is second_key

    def test_inspect_insertion_order(self):
        h = Hash()
        h.set(Integer(2), String("two"))
        h.set(TRUE, Integer(1))
        assert h.inspect() == "{2: two, true: 1}"


# --- Environment Tests ---

class TestEnvironment:
    """Test environment frames."""

    def test_set_and_get(self):
        env = Environment()
        assert env.set("x", Integer(1)) == Integer(1)
        assert env.get("x") == Integer(1)

    def test_missing_name(self):
        assert Environment().get("nope") is None

    def test_lookup_walks_outward(self):
        outer = Environment()
        outer.set("x", Integer(1))
        inner = new_enclosed_environment(outer)
        assert inner.get("x") == Integer(1)
        assert inner.contains("x")

    def test_set_writes_current_frame_only(self):
        """Inner bindings shadow outer ones without touching them."""
        outer = Environment()
        outer.set("x", Integer(1))
        inner = outer.enclosed()
        inner.set("x", Integer(2))
        assert inner.get("x") == Integer(2)
        assert outer.get("x") == Integer(1)

    def test_frames_are_shared(self):
        """A child sees bindings added to its parent after it was created."""
        outer = Environment()
        inner = outer.enclosed()
        outer.set("late", TRUE)
        assert inner.get("late") is TRUE

    def test_deep_chain(self):
        env = Environment()
        env.set("root", Integer(0))
        for _ in range(5000):
            env = env.enclosed()
        assert env.get("root") == Integer(0)


# --- Builtin Tests ---

class TestBuiltins:
    """Test built-in functions called directly."""

    @pytest.fixture
    def registry(self):
        return BuiltinRegistry(io.StringIO())

    def call(self, registry, name, *args):
        return registry.get(name).fn(*args)

    def test_registered_names(self, registry):
        assert registry.names() == ["first", "last", "len", "push", "puts", "rest"]
        assert "len" in registry
        assert registry.get("missing") is None

    def test_len(self, registry):
        assert self.call(registry, "len", String("four")) == Integer(4)
        assert self.call(registry, "len", String("")) == Integer(0)

    def test_len_errors(self, registry):
        assert self.call(registry, "len", Integer(1)) == Error(
            "argument to `len` not supported, got INTEGER")
        assert self.call(registry, "len", String("a"), String("b")) == Error(
            "wrong number of arguments. got=2, want=1")

    def test_first_last(self, registry):
        arr = Array([Integer(1), Integer(2), Integer(3)])
        assert self.call(registry, "first", arr) == Integer(1)
        assert self.call(registry, "last", arr) == Integer(3)
        assert self.call(registry, "first", Array()) is NULL
        assert self.call(registry, "last", Array()) is NULL

    def test_last_error_names_last(self, registry):
        assert self.call(registry, "last", Integer(1)) == Error(
            "argument to `last` not supported, got INTEGER")

    def test_rest(self, registry):
        arr = Array([Integer(1), Integer(2), Integer(3)])
        assert self.call(registry, "rest", arr) == Array([Integer(2), Integer(3)])
        assert self.call(registry, "rest", Array([Integer(1)])) == Array()
        assert self.call(registry, "rest", Array()) is NULL

    def test_push_returns_new_array(self, registry):
        arr = Array([Integer(1)])
        pushed = self.call(registry, "push", arr, Integer(2))
        assert pushed == Array([Integer(1), Integer(2)])
        assert arr == Array([Integer(1)])

    def test_push_errors(self, registry):
        assert self.call(registry, "push", Array()) == Error(
            "wrong number of arguments. got=1, want=2")
        assert self.call(registry, "push", Integer(1), Integer(2)) == Error(
            "argument to `push` not supported, got INTEGER")

    def test_puts_writes_each_argument(self, registry):
        result = self.call(registry, "puts", String("hello"), Integer(5))
        assert result is NULL
        assert registry.output.getvalue() == "hello\n5\n"

    def test_puts_defaults_to_stdout(self, capsys):
        result = get_builtin_registry().get("puts").fn(String("out"))
        assert result is NULL
        assert capsys.readouterr().out == "out\n"

    def test_register_custom_builtin(self, registry):
        registry.register("zero", lambda *args: Integer(0))
        assert self.call(registry, "zero") == Integer(0)
