"""
Pratt parser for the Monkey language.

Converts a token stream into an Abstract Syntax Tree (AST).

Usage:
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    if parser.errors:
        ...

Or, in one step:
    result = parse(source)
    result.program, result.errors

Parsing never raises. Every problem is recorded in `parser.diagnostics` and
parsing carries on, so a single source can report several unrelated errors.
Where a construct cannot be completed the parser returns a placeholder
Identifier with an empty name.

Operator precedence (higher binds tighter):
    LOWEST
    EQUALS       == !=
    LESSGREATER  < >
    SUM          + -
    PRODUCT      * /
    PREFIX       -x !x
    CALL         f(x)
    INDEX        a[i]
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional

from .tokens import Token, TokenType
from .lexer import Lexer
from .ast import (
    # Expressions
    Expression, Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
    # Statements
    Statement, LetStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Program,
)
from .errors import (
    Diagnostic,
    DiagnosticCollector,
    error_no_prefix_parse_fn,
    error_unexpected_token,
    error_unterminated_block,
    error_invalid_parameter,
    error_nesting_too_deep,
)
from .recursion import raised_recursion_limit

logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2
    LESSGREATER = 3
    SUM = 4
    PRODUCT = 5
    PREFIX = 6
    CALL = 7
    INDEX = 8


PRECEDENCES: Dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Expression]


class Parser:
    """
    Pratt parser with a two-token window (current and peek).

    Accepts any iterable of tokens: a list from `tokenize()` or a Lexer that
    produces them lazily. A stream that ends without an EOF token behaves as
    if one followed.
    """

    def __init__(self, tokens: Iterable[Token], filename: Optional[str] = None,
                 source: Optional[str] = None, max_errors: Optional[int] = None):
        if source is None and isinstance(tokens, Lexer):
            source = tokens.source
            filename = filename or tokens.filename
        self.filename = filename
        self.source = source
        self._source_lines = source.splitlines() if source is not None else []
        self._stream = iter(tokens)
        self._eof: Optional[Token] = None
        self.diagnostics = DiagnosticCollector(max_errors)

        self.prefix_parse_fns: Dict[TokenType, PrefixParseFn] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
            TokenType.LBRACKET: self._parse_array_literal,
            TokenType.LBRACE: self._parse_hash_literal,
        }
        self.infix_parse_fns: Dict[TokenType, InfixParseFn] = {
            TokenType.PLUS: self._parse_infix_expression,
            TokenType.MINUS: self._parse_infix_expression,
            TokenType.ASTERISK: self._parse_infix_expression,
            TokenType.SLASH: self._parse_infix_expression,
            TokenType.EQ: self._parse_infix_expression,
            TokenType.NOT_EQ: self._parse_infix_expression,
            TokenType.LT: self._parse_infix_expression,
            TokenType.GT: self._parse_infix_expression,
            TokenType.LPAREN: self._parse_call_expression,
            TokenType.LBRACKET: self._parse_index_expression,
        }

        self.cur_token = self._pull()
        self.peek_token = self._pull()

    @property
    def errors(self) -> List[str]:
        """Diagnostic messages in the order they were reported."""
        return self.diagnostics.messages

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _pull(self) -> Token:
        token = next(self._stream, None)
        if token is None:
            if self._eof is None:
                self._eof = Token(TokenType.EOF, "")
            return self._eof
        if token.type == TokenType.EOF:
            self._eof = token
        return token

    def _next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self._pull()

    def _cur_token_is(self, token_type: TokenType) -> bool:
        return self.cur_token.type == token_type

    def _peek_token_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type == token_type

    def _expect_peek(self, token_type: TokenType) -> bool:
        """Advance if the next token has the given type, otherwise report it."""
        if self._peek_token_is(token_type):
            self._next_token()
            return True
        self._report(error_unexpected_token(
            token_type.value, self.peek_token.type.value,
            self.peek_token.span, self._line_of(self.peek_token)))
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    def _skip_to_statement_end(self) -> None:
        """Consume tokens through the next ';'.

        A '}' closing the enclosing block also ends the statement, so
        `fn() { return x }` keeps its brace.
        """
        while not (self._cur_token_is(TokenType.SEMICOLON)
                   or self._cur_token_is(TokenType.EOF)
                   or self._peek_token_is(TokenType.RBRACE)):
            self._next_token()

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _line_of(self, token: Token) -> Optional[str]:
        if token.span is None:
            return None
        line_num = token.span.start.line
        if 1 <= line_num <= len(self._source_lines):
            return self._source_lines[line_num - 1]
        return None

    def _report(self, diagnostic: Diagnostic) -> None:
        logger.debug("parse error at %s: %s",
                     diagnostic.span.start if diagnostic.span else "?",
                     diagnostic.message)
        self.diagnostics.add(diagnostic)

    def _placeholder(self) -> Identifier:
        return Identifier(token=self.cur_token, value="")

    # =========================================================================
    # Statements
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse statements until EOF (or until the error limit is reached)."""
        program = Program()
        with raised_recursion_limit():
            try:
                while not self._cur_token_is(TokenType.EOF):
                    if self.diagnostics.should_stop:
                        logger.debug("stopping after %d errors", self.diagnostics.error_count)
                        break
                    statement = self._parse_statement()
                    if statement is not None:
                        program.statements.append(statement)
                    self._next_token()
            except RecursionError:
                self._report(error_nesting_too_deep(
                    self.cur_token.span, self._line_of(self.cur_token)))
        return program

    def _parse_statement(self) -> Optional[Statement]:
        if self._cur_token_is(TokenType.LET):
            return self._parse_let_statement()
        if self._cur_token_is(TokenType.RETURN):
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> Optional[LetStatement]:
        token = self.cur_token

        if not self._expect_peek(TokenType.IDENT):
            self._skip_to_statement_end()
            return None
        name = Identifier(token=self.cur_token, value=self.cur_token.literal)

        if not self._expect_peek(TokenType.ASSIGN):
            self._skip_to_statement_end()
            return None

        self._next_token()
        value = self._parse_expression(Precedence.LOWEST)
        self._skip_to_statement_end()
        return LetStatement(token=token, name=name, value=value)

    def _parse_return_statement(self) -> ReturnStatement:
        token = self.cur_token
        self._next_token()

        value = None
        if not (self._cur_token_is(TokenType.SEMICOLON)
                or self._cur_token_is(TokenType.EOF)):
            value = self._parse_expression(Precedence.LOWEST)

        self._skip_to_statement_end()
        return ReturnStatement(token=token, value=value)

    def _parse_expression_statement(self) -> ExpressionStatement:
        token = self.cur_token
        expression = self._parse_expression(Precedence.LOWEST)
        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return ExpressionStatement(token=token, expression=expression)

    def _parse_block_statement(self) -> BlockStatement:
        """Parse statements up to the matching '}'. The current token is '{'."""
        block = BlockStatement(token=self.cur_token)
        self._next_token()

        while not (self._cur_token_is(TokenType.RBRACE)
                   or self._cur_token_is(TokenType.EOF)):
            if self.diagnostics.should_stop:
                return block
            statement = self._parse_statement()
            if statement is not None:
                block.statements.append(statement)
            self._next_token()

        if self._cur_token_is(TokenType.EOF):
            self._report(error_unterminated_block(
                self.cur_token.span, self._line_of(self.cur_token)))
        return block

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self._report(error_no_prefix_parse_fn(
                self.cur_token.literal, self.cur_token.span,
                self._line_of(self.cur_token)))
            return None
        left = prefix()

        while (not self._peek_token_is(TokenType.SEMICOLON)
               and precedence < self._peek_precedence()):
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Expression:
        return Identifier(token=self.cur_token, value=self.cur_token.literal)

    def _parse_integer_literal(self) -> Expression:
        return IntegerLiteral(token=self.cur_token, value=int(self.cur_token.literal))

    def _parse_string_literal(self) -> Expression:
        return StringLiteral(token=self.cur_token, value=self.cur_token.literal)

    def _parse_boolean(self) -> Expression:
        return BooleanLiteral(token=self.cur_token,
                              value=self._cur_token_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Expression:
        token = self.cur_token
        self._next_token()
        right = self._parse_expression(Precedence.PREFIX)
        return PrefixExpression(token=token, operator=token.literal, right=right)

    def _parse_infix_expression(self, left: Expression) -> Expression:
        token = self.cur_token
        precedence = self._cur_precedence()
        self._next_token()
        right = self._parse_expression(precedence)
        return InfixExpression(token=token, left=left, operator=token.literal,
                               right=right)

    def _parse_grouped_expression(self) -> Expression:
        self._next_token()
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None or not self._expect_peek(TokenType.RPAREN):
            return self._placeholder()
        return expression

    def _parse_if_expression(self) -> Expression:
        token = self.cur_token
        if not self._expect_peek(TokenType.LPAREN):
            return self._placeholder()

        self._next_token()
        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None:
            return self._placeholder()

        if not self._expect_peek(TokenType.RPAREN):
            return self._placeholder()
        if not self._expect_peek(TokenType.LBRACE):
            return self._placeholder()
        consequence = self._parse_block_statement()

        alternative = None
        if self._peek_token_is(TokenType.ELSE):
            self._next_token()
            if not self._expect_peek(TokenType.LBRACE):
                return self._placeholder()
            alternative = self._parse_block_statement()

        return IfExpression(token=token, condition=condition,
                            consequence=consequence, alternative=alternative)

    def _parse_function_literal(self) -> Expression:
        token = self.cur_token
        if not self._expect_peek(TokenType.LPAREN):
            return self._placeholder()

        parameters = self._parse_function_parameters()
        if parameters is None:
            return self._placeholder()

        if not self._expect_peek(TokenType.LBRACE):
            return self._placeholder()
        body = self._parse_block_statement()

        return FunctionLiteral(token=token, parameters=parameters, body=body)

    def _parse_function_parameters(self) -> Optional[List[Identifier]]:
        """Parse `a, b, c)`. The current token is '('."""
        parameters: List[Identifier] = []
        if self._peek_token_is(TokenType.RPAREN):
            self._next_token()
            return parameters

        self._next_token()
        param = self._parse_parameter()
        if param is None:
            return None
        parameters.append(param)

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            param = self._parse_parameter()
            if param is None:
                return None
            parameters.append(param)

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return parameters

    def _parse_parameter(self) -> Optional[Identifier]:
        if not self._cur_token_is(TokenType.IDENT):
            self._report(error_invalid_parameter(
                self.cur_token.type.value, self.cur_token.span,
                self._line_of(self.cur_token)))
            return None
        return Identifier(token=self.cur_token, value=self.cur_token.literal)

    def _parse_call_expression(self, function: Expression) -> Expression:
        token = self.cur_token
        arguments = self._parse_expression_list(TokenType.RPAREN)
        return CallExpression(token=token, function=function, arguments=arguments)

    def _parse_expression_list(self, end: TokenType) -> List[Expression]:
        """Parse comma separated expressions up to `end`.

        Returns an empty list when the terminator is missing.
        """
        items: List[Expression] = []
        if self._peek_token_is(end):
            self._next_token()
            return items

        self._next_token()
        item = self._parse_expression(Precedence.LOWEST)
        if item is not None:
            items.append(item)

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            item = self._parse_expression(Precedence.LOWEST)
            if item is not None:
                items.append(item)

        if not self._expect_peek(end):
            return []
        return items

    def _parse_array_literal(self) -> Expression:
        token = self.cur_token
        elements = self._parse_expression_list(TokenType.RBRACKET)
        return ArrayLiteral(token=token, elements=elements)

    def _parse_index_expression(self, left: Expression) -> Expression:
        token = self.cur_token
        self._next_token()
        index = self._parse_expression(Precedence.LOWEST)
        if index is None or not self._expect_peek(TokenType.RBRACKET):
            return self._placeholder()
        return IndexExpression(token=token, left=left, index=index)

    def _parse_hash_literal(self) -> Expression:
        token = self.cur_token
        pairs = []

        while not self._peek_token_is(TokenType.RBRACE):
            self._next_token()
            key = self._parse_expression(Precedence.LOWEST)
            if key is None or not self._expect_peek(TokenType.COLON):
                return self._placeholder()

            self._next_token()
            value = self._parse_expression(Precedence.LOWEST)
            if value is None:
                return self._placeholder()
            pairs.append((key, value))

            if (not self._peek_token_is(TokenType.RBRACE)
                    and not self._expect_peek(TokenType.COMMA)):
                return self._placeholder()

        self._next_token()
        return HashLiteral(token=token, pairs=pairs)


@dataclass
class ParseResult:
    """A parsed program together with everything reported while parsing it."""
    program: Program
    diagnostics: DiagnosticCollector

    @property
    def errors(self) -> List[str]:
        return self.diagnostics.messages

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_errors


def parse(source: str, filename: Optional[str] = None,
          max_errors: Optional[int] = None) -> ParseResult:
    """
    Convenience function to lex and parse source code.

    Args:
        source: The source code to parse
        filename: Optional filename for diagnostics
        max_errors: Stop once this many errors have been reported
            (default: report every error)

    Returns:
        ParseResult holding the program and its diagnostics
    """
    parser = Parser(Lexer(source, filename), filename, source, max_errors)
    program = parser.parse_program()
    return ParseResult(program, parser.diagnostics)
