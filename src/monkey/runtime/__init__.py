"""
Monkey runtime - tree-walking evaluation.

This module provides:
- Interpreter: Evaluates AST nodes to runtime values
- MonkeyObject and its subclasses: The runtime object model
- Environment: Lexically scoped name bindings
- BuiltinRegistry: Built-in functions (len, first, last, rest, push, puts)
"""

from .values import (
    ObjectType,
    MonkeyObject,
    Hashable,
    HashKey,
    HashPair,
    Integer,
    String,
    Boolean,
    Null,
    ReturnValue,
    Error,
    Array,
    Hash,
    Function,
    Builtin,
    TRUE,
    FALSE,
    NULL,
    native_bool_to_boolean,
    is_truthy,
    is_error,
    is_hashable,
)

from .environment import (
    Environment,
    new_environment,
    new_enclosed_environment,
)

from .builtins import (
    BuiltinRegistry,
    get_builtin_registry,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    evaluate,
    run,
)

__all__ = [
    # Values
    'ObjectType',
    'MonkeyObject',
    'Hashable',
    'HashKey',
    'HashPair',
    'Integer',
    'String',
    'Boolean',
    'Null',
    'ReturnValue',
    'Error',
    'Array',
    'Hash',
    'Function',
    'Builtin',
    'TRUE',
    'FALSE',
    'NULL',
    'native_bool_to_boolean',
    'is_truthy',
    'is_error',
    'is_hashable',
    # Environment
    'Environment',
    'new_environment',
    'new_enclosed_environment',
    # Builtins
    'BuiltinRegistry',
    'get_builtin_registry',
    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'evaluate',
    'run',
]
