"""
Tree-walking interpreter for the Monkey language.

Evaluates AST nodes to produce runtime values. Language-level failures are
Error values that travel up through every enclosing construct unchanged,
the same way a `return` travels up to the function call that unwraps it.
Only faults outside the language raise: a node the evaluator has no rule
for (UnknownNodeError) and runaway recursion (EvaluationDepthError).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .values import (
    MonkeyObject, ObjectType, Integer, String, ReturnValue, Error,
    Array, Hash, Function, Builtin,
    TRUE, FALSE, NULL,
    native_bool_to_boolean, is_truthy, is_error, is_hashable,
)
from .environment import Environment, new_enclosed_environment
from .builtins import BuiltinRegistry, get_builtin_registry

from ..ast import (
    Node, Program, Expression,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
)
from ..config import InterpreterConfig
from ..errors import (
    DiagnosticCollector, ParserError, UnknownNodeError, EvaluationDepthError,
)
from ..parser import parse
from ..recursion import raised_recursion_limit

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of running a source text.

    `value` is None when the source was not evaluated because it had parse
    errors.
    """
    value: Optional[MonkeyObject]
    diagnostics: DiagnosticCollector

    @property
    def errors(self) -> List[str]:
        """Parse error messages."""
        return self.diagnostics.messages

    @property
    def success(self) -> bool:
        return (self.value is not None
                and not self.diagnostics.has_errors
                and not is_error(self.value))

    @property
    def error_message(self) -> Optional[str]:
        if self.diagnostics.has_errors:
            return self.diagnostics.messages[0]
        if isinstance(self.value, Error):
            return self.value.message
        return None


class Interpreter:
    """
    Tree-walking interpreter.

    Evaluates AST nodes by dispatching on the node type.
    """

    def __init__(self, config: Optional[InterpreterConfig] = None,
                 output: Optional[TextIO] = None,
                 builtins: Optional[BuiltinRegistry] = None):
        """
        Initialize the interpreter.

        Args:
            config: Parsing and evaluation settings (defaults if omitted)
            output: Stream for `puts` (stdout if omitted)
            builtins: Registry to resolve builtin names against; overrides
                `output`
        """
        self.config = config or InterpreterConfig()
        if builtins is None:
            builtins = BuiltinRegistry(output) if output is not None else get_builtin_registry()
        self.builtins = builtins
        self._call_depth = 0

    def execute(self, source: str, env: Optional[Environment] = None,
                filename: Optional[str] = None) -> ExecutionResult:
        """
        Parse and evaluate source text.

        With a strict config a source with parse errors is not evaluated;
        otherwise it is evaluated anyway, with a warning.
        """
        parsed = parse(source, filename, self.config.max_errors)
        if not parsed.ok:
            if self.config.strict:
                logger.debug("not evaluating source with %d parse error(s)",
                             parsed.diagnostics.error_count)
                return ExecutionResult(None, parsed.diagnostics)
            logger.warning("evaluating source with %d parse error(s): %s",
                           parsed.diagnostics.error_count,
                           "; ".join(parsed.errors))
        value = self.eval_program(parsed.program, env)
        return ExecutionResult(value, parsed.diagnostics)

    def eval_program(self, program: Program,
                     env: Optional[Environment] = None) -> MonkeyObject:
        """Evaluate a whole program in `env` (a fresh environment if omitted)."""
        if env is None:
            env = Environment()
        logger.debug("evaluating program with %d statement(s)", len(program.statements))
        self._call_depth = 0
        try:
            with raised_recursion_limit():
                return self._eval_program(program, env)
        except RecursionError as exc:
            raise EvaluationDepthError(
                "maximum recursion depth exceeded during evaluation") from exc

    # =========================================================================
    # Dispatch
    # =========================================================================

    def evaluate(self, node: Node, env: Environment) -> MonkeyObject:
        """Evaluate a single node."""
        # Statements
        if isinstance(node, Program):
            return self._eval_program(node, env)
        elif isinstance(node, ExpressionStatement):
            if node.expression is None:
                return Error("missing expression in expression statement")
            return self.evaluate(node.expression, env)
        elif isinstance(node, BlockStatement):
            return self._eval_block(node, env)
        elif isinstance(node, ReturnStatement):
            return self._eval_return(node, env)
        elif isinstance(node, LetStatement):
            return self._eval_let(node, env)

        # Literals
        elif isinstance(node, IntegerLiteral):
            return Integer(node.value)
        elif isinstance(node, StringLiteral):
            return String(node.value)
        elif isinstance(node, BooleanLiteral):
            return native_bool_to_boolean(node.value)

        # Expressions
        elif isinstance(node, PrefixExpression):
            return self._eval_prefix(node, env)
        elif isinstance(node, InfixExpression):
            return self._eval_infix(node, env)
        elif isinstance(node, IfExpression):
            return self._eval_if(node, env)
        elif isinstance(node, Identifier):
            return self._eval_identifier(node, env)
        elif isinstance(node, FunctionLiteral):
            return Function(node.parameters, node.body, env)
        elif isinstance(node, CallExpression):
            return self._eval_call(node, env)
        elif isinstance(node, ArrayLiteral):
            elements = self._eval_expressions(node.elements, env)
            if len(elements) == 1 and is_error(elements[0]):
                return elements[0]
            return Array(tuple(elements))
        elif isinstance(node, IndexExpression):
            return self._eval_index(node, env)
        elif isinstance(node, HashLiteral):
            return self._eval_hash_literal(node, env)
        else:
            raise UnknownNodeError(f"cannot evaluate node of type {type(node).__name__}")

    # =========================================================================
    # Statements
    # =========================================================================

    def _eval_program(self, program: Program, env: Environment) -> MonkeyObject:
        result: MonkeyObject = NULL
        for statement in program.statements:
            result = self.evaluate(statement, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def _eval_block(self, block: BlockStatement, env: Environment) -> MonkeyObject:
        """Evaluate a block. A ReturnValue is passed on still wrapped."""
        result: MonkeyObject = NULL
        for statement in block.statements:
            result = self.evaluate(statement, env)
            if result.type() in (ObjectType.RETURN_VALUE, ObjectType.ERROR):
                return result
        return result

    def _eval_return(self, stmt: ReturnStatement, env: Environment) -> MonkeyObject:
        if stmt.value is None:
            return ReturnValue(NULL)
        value = self.evaluate(stmt.value, env)
        if is_error(value):
            return value
        return ReturnValue(value)

    def _eval_let(self, stmt: LetStatement, env: Environment) -> MonkeyObject:
        if stmt.value is None:
            return Error(f"missing value in let statement: {stmt.name.value}")
        value = self.evaluate(stmt.value, env)
        if is_error(value):
            return value
        return env.set(stmt.name.value, value)

    # =========================================================================
    # Operators
    # =========================================================================

    def _eval_prefix(self, expr: PrefixExpression, env: Environment) -> MonkeyObject:
        if expr.right is None:
            return Error(f"missing right operand for operator {expr.operator}")
        right = self.evaluate(expr.right, env)
        if is_error(right):
            return right

        if expr.operator == "!":
            return FALSE if is_truthy(right) else TRUE
        if expr.operator == "-":
            if not isinstance(right, Integer):
                return Error(f"unknown operator: -{right.type()}")
            return Integer(-right.value)
        return Error(f"unknown operator: {expr.operator}{right.type()}")

    def _eval_infix(self, expr: InfixExpression, env: Environment) -> MonkeyObject:
        left = self.evaluate(expr.left, env)
        if is_error(left):
            return left
        if expr.right is None:
            return Error(f"missing right operand for operator {expr.operator}")
        right = self.evaluate(expr.right, env)
        if is_error(right):
            return right

        op = expr.operator
        if left.type() != right.type():
            return Error(f"type mismatch: {left.type()} {op} {right.type()}")
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix(op, left, right)
        if isinstance(left, String) and isinstance(right, String):
            if op != "+":
                return Error(f"unknown operator: {left.type()} {op} {right.type()}")
            return String(left.value + right.value)
        # Booleans and null are singletons, so identity is equality
        if op == "==":
            return native_bool_to_boolean(left is right)
        if op == "!=":
            return native_bool_to_boolean(left is not right)
        return Error(f"unknown operator: {left.type()} {op} {right.type()}")

    def _eval_integer_infix(self, op: str, left: Integer, right: Integer) -> MonkeyObject:
        a, b = left.value, right.value
        if op == "+":
            return Integer(a + b)
        elif op == "-":
            return Integer(a - b)
        elif op == "*":
            return Integer(a * b)
        elif op == "/":
            if b == 0:
                return Error("division by zero")
            return Integer(a // b)
        elif op == "<":
            return native_bool_to_boolean(a < b)
        elif op == ">":
            return native_bool_to_boolean(a > b)
        elif op == "==":
            return native_bool_to_boolean(a == b)
        elif op == "!=":
            return native_bool_to_boolean(a != b)
        return Error(f"unknown operator: {left.type()} {op} {right.type()}")

    # =========================================================================
    # Control flow and names
    # =========================================================================

    def _eval_if(self, expr: IfExpression, env: Environment) -> MonkeyObject:
        condition = self.evaluate(expr.condition, env)
        if is_error(condition):
            return condition
        if is_truthy(condition):
            return self.evaluate(expr.consequence, env)
        if expr.alternative is not None:
            return self.evaluate(expr.alternative, env)
        return NULL

    def _eval_identifier(self, ident: Identifier, env: Environment) -> MonkeyObject:
        value = env.get(ident.value)
        if value is not None:
            return value
        builtin = self.builtins.get(ident.value)
        if builtin is not None:
            return builtin
        return Error(f"identifier not found: {ident.value}")

    # =========================================================================
    # Functions
    # =========================================================================

    def _eval_call(self, call: CallExpression, env: Environment) -> MonkeyObject:
        function = self.evaluate(call.function, env)
        if is_error(function):
            return function
        args = self._eval_expressions(call.arguments, env)
        if len(args) == 1 and is_error(args[0]):
            return args[0]
        return self.apply_function(function, args)

    def _eval_expressions(self, exprs: List[Expression],
                          env: Environment) -> List[MonkeyObject]:
        """Evaluate left to right. On the first Error, return just that Error."""
        values = []
        for expr in exprs:
            value = self.evaluate(expr, env)
            if is_error(value):
                return [value]
            values.append(value)
        return values

    def apply_function(self, function: MonkeyObject,
                       args: List[MonkeyObject]) -> MonkeyObject:
        """Call a closure or builtin with already evaluated arguments."""
        if isinstance(function, Function):
            self._call_depth += 1
            try:
                limit = self.config.max_call_depth
                if limit is not None and self._call_depth > limit:
                    raise EvaluationDepthError(f"maximum call depth of {limit} exceeded")
                call_env = new_enclosed_environment(function.env)
                for param, arg in zip(function.parameters, args):
                    call_env.set(param.value, arg)
                result = self.evaluate(function.body, call_env)
            finally:
                self._call_depth -= 1
            if isinstance(result, ReturnValue):
                return result.value
            return result
        if isinstance(function, Builtin):
            return function.fn(*args)
        return Error(f"not a function: {function.type()}")

    # =========================================================================
    # Collections
    # =========================================================================

    def _eval_index(self, expr: IndexExpression, env: Environment) -> MonkeyObject:
        left = self.evaluate(expr.left, env)
        if is_error(left):
            return left
        index = self.evaluate(expr.index, env)
        if is_error(index):
            return index

        if isinstance(left, Array) and isinstance(index, Integer):
            i = index.value
            if 0 <= i < len(left.elements):
                return left.elements[i]
            return NULL
        if isinstance(left, Hash):
            if not is_hashable(index):
                return Error(f"unusable as hash key: {index.type()}")
            value = left.get(index)
            return value if value is not None else NULL
        return Error(f"index operator not supported: {left.type()}")

    def _eval_hash_literal(self, expr: HashLiteral, env: Environment) -> MonkeyObject:
        result = Hash()
        for key_node, value_node in expr.pairs:
            key = self.evaluate(key_node, env)
            if is_error(key):
                return key
            if not is_hashable(key):
                return Error(f"unusable as hash key: {key.type()}")
            value = self.evaluate(value_node, env)
            if is_error(value):
                return value
            result.set(key, value)
        return result


# Convenience functions for simple execution

def run(source: str, env: Optional[Environment] = None,
        config: Optional[InterpreterConfig] = None,
        output: Optional[TextIO] = None,
        filename: Optional[str] = None) -> ExecutionResult:
    """
    Parse and evaluate source text, returning the value with the parse
    diagnostics. Parse errors are reported in the result, never raised.
    """
    interpreter = Interpreter(config, output)
    return interpreter.execute(source, env, filename)


def evaluate(source: str, env: Optional[Environment] = None,
             config: Optional[InterpreterConfig] = None,
             output: Optional[TextIO] = None) -> MonkeyObject:
    """
    Evaluate source text and return the resulting value.

        from monkey import evaluate

        evaluate("let add = fn(a, b) { a + b }; add(2, 3)").inspect()  # "5"

    Raises:
        ParserError: If the source has parse errors and the config is strict
    """
    result = run(source, env, config, output)
    if result.value is None:
        raise ParserError(result.diagnostics.diagnostics)
    return result.value
