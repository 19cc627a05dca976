"""
Runtime values for the Monkey interpreter.

Every value is a MonkeyObject with a type() tag and an inspect() text.
TRUE, FALSE and NULL are the only Boolean and Null instances ever created,
so they can be compared by identity.
"""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from ..ast import BlockStatement, Identifier
    from .environment import Environment


class ObjectType(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    NULL = "NULL"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    ARRAY = "ARRAY"
    HASH = "HASH"

    def __str__(self) -> str:
        return self.value


class MonkeyObject:
    """Base class for all runtime values."""

    def type(self) -> ObjectType:
        raise NotImplementedError

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.inspect()


@dataclass(frozen=True)
class HashKey:
    """Structural key of a hashable value: its type tag and an integer."""
    type: ObjectType
    value: int


class Hashable(MonkeyObject):
    """A value that can be used as a hash key."""

    def hash_key(self) -> HashKey:
        raise NotImplementedError


@dataclass
class Integer(Hashable):
    value: int

    def type(self) -> ObjectType:
        return ObjectType.INTEGER

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(ObjectType.INTEGER, self.value)


@dataclass
class String(Hashable):
    value: str

    def type(self) -> ObjectType:
        return ObjectType.STRING

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        digest = hashlib.md5(self.value.encode("utf-8")).hexdigest()
        return HashKey(ObjectType.STRING, int(digest, 16))


@dataclass(eq=False)
class Boolean(Hashable):
    value: bool

    def type(self) -> ObjectType:
        return ObjectType.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(ObjectType.BOOLEAN, 1 if self.value else 0)


@dataclass(eq=False)
class Null(MonkeyObject):

    def type(self) -> ObjectType:
        return ObjectType.NULL

    def inspect(self) -> str:
        return "null"


@dataclass
class ReturnValue(MonkeyObject):
    """Wraps the value of a `return` until the enclosing call unwraps it."""
    value: MonkeyObject

    def type(self) -> ObjectType:
        return ObjectType.RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass
class Error(MonkeyObject):
    """A language-level error. It ends the evaluation that produced it."""
    message: str

    def type(self) -> ObjectType:
        return ObjectType.ERROR

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


@dataclass
class Array(MonkeyObject):
    elements: Tuple[MonkeyObject, ...] = ()

    def __post_init__(self) -> None:
        self.elements = tuple(self.elements)

    def type(self) -> ObjectType:
        return ObjectType.ARRAY

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"

    def __len__(self) -> int:
        return len(self.elements)


@dataclass
class HashPair:
    """The key object as written by the program and the value stored under it."""
    key: MonkeyObject
    value: MonkeyObject


@dataclass
class Hash(MonkeyObject):
    """A hash table keyed by HashKey. Iteration follows insertion order."""
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    def type(self) -> ObjectType:
        return ObjectType.HASH

    def inspect(self) -> str:
        items = ", ".join(f"{p.key.inspect()}: {p.value.inspect()}"
                          for p in self.pairs.values())
        return "{" + items + "}"

    def set(self, key: Hashable, value: MonkeyObject) -> None:
        """Insert or overwrite. An existing entry keeps its position but
        takes the new key object."""
        self.pairs[key.hash_key()] = HashPair(key, value)

    def get(self, key: Union[Hashable, HashKey]) -> Optional[MonkeyObject]:
        hash_key = key if isinstance(key, HashKey) else key.hash_key()
        pair = self.pairs.get(hash_key)
        return pair.value if pair is not None else None

    def __len__(self) -> int:
        return len(self.pairs)


@dataclass(eq=False)
class Function(MonkeyObject):
    """A closure: parameters, body and the environment it was created in."""
    parameters: List["Identifier"]
    body: "BlockStatement"
    env: "Environment"

    def type(self) -> ObjectType:
        return ObjectType.FUNCTION

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


BuiltinFunction = Callable[..., MonkeyObject]


@dataclass(eq=False)
class Builtin(MonkeyObject):
    name: str
    fn: BuiltinFunction

    def type(self) -> ObjectType:
        return ObjectType.BUILTIN

    def inspect(self) -> str:
        return "builtin function"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


def is_truthy(obj: MonkeyObject) -> bool:
    """Everything except NULL and FALSE is truthy."""
    return obj is not NULL and obj is not FALSE


def is_error(obj: Optional[MonkeyObject]) -> bool:
    return obj is not None and obj.type() == ObjectType.ERROR


def is_hashable(obj: MonkeyObject) -> bool:
    return isinstance(obj, Hashable)
