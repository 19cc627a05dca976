"""
Monkey - a small dynamically typed language.

This package provides:
- Lexer: Tokenizes source code
- Parser: Builds an AST with a Pratt parser, collecting diagnostics
- Interpreter: Evaluates the AST with closures and first-class error values
- InterpreterConfig: Settings, loadable from YAML or JSON

Usage:
    from monkey import evaluate, parse, run

    evaluate("let double = fn(x) { x * 2 }; double(21)").inspect()   # "42"

    # Inspect how an expression was grouped
    str(parse("a + b * c").program)                                 # "(a + (b * c))"

    # Keep parse errors as data instead of an exception
    result = run("let = 5;")
    if not result.success:
        for message in result.errors:
            print(message)
"""

__version__ = "0.1.0"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
    lookup_ident,
)

from .lexer import (
    Lexer,
    tokenize,
    lex,
)

from .parser import (
    Parser,
    ParseResult,
    Precedence,
    parse,
)

from .ast import (
    # Base
    Node,
    Statement,
    Expression,
    # Expressions
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    ArrayLiteral,
    IndexExpression,
    HashLiteral,
    # Statements
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Program,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    DiagnosticCollector,
    MonkeyError,
    ParserError,
    UnknownNodeError,
    EvaluationDepthError,
    ConfigError,
)

from .config import (
    InterpreterConfig,
    load_config,
    save_config,
)

from .runtime import (
    MonkeyObject,
    ObjectType,
    Environment,
    BuiltinRegistry,
    Interpreter,
    ExecutionResult,
    evaluate,
    run,
)

__all__ = [
    '__version__',
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',
    'lookup_ident',
    # Lexer
    'Lexer',
    'tokenize',
    'lex',
    # Parser
    'Parser',
    'ParseResult',
    'Precedence',
    'parse',
    # AST
    'Node',
    'Statement',
    'Expression',
    'Identifier',
    'IntegerLiteral',
    'StringLiteral',
    'BooleanLiteral',
    'PrefixExpression',
    'InfixExpression',
    'IfExpression',
    'FunctionLiteral',
    'CallExpression',
    'ArrayLiteral',
    'IndexExpression',
    'HashLiteral',
    'LetStatement',
    'ReturnStatement',
    'ExpressionStatement',
    'BlockStatement',
    'Program',
    # Errors
    'ErrorSeverity',
    'Diagnostic',
    'DiagnosticCollector',
    'MonkeyError',
    'ParserError',
    'UnknownNodeError',
    'EvaluationDepthError',
    'ConfigError',
    # Config
    'InterpreterConfig',
    'load_config',
    'save_config',
    # Runtime
    'MonkeyObject',
    'ObjectType',
    'Environment',
    'BuiltinRegistry',
    'Interpreter',
    'ExecutionResult',
    'evaluate',
    'run',
]
