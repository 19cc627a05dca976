"""
Unit tests for the Monkey lexer.
"""

import pytest
from monkey import tokenize, lex, Lexer, TokenType, lookup_ident


def types_of(source: str):
    return [t.type for t in tokenize(source)]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_whitespace_only(self):
        """Whitespace of every kind is skipped."""
        assert types_of(" \t\r\n  ") == [TokenType.EOF]

    def test_let_statement(self):
        """Basic let statement tokenization."""
        tokens = tokenize("let five = 5;")
        assert [(t.type, t.literal) for t in tokens] == [
            (TokenType.LET, "let"),
            (TokenType.IDENT, "five"),
            (TokenType.ASSIGN, "="),
            (TokenType.INT, "5"),
            (TokenType.SEMICOLON, ";"),
            (TokenType.EOF, ""),
        ]

    def test_function_literal(self):
        """Function literal tokens."""
        assert types_of("fn(x, y) { x + y; }") == [
            TokenType.FUNCTION,
            TokenType.LPAREN,
            TokenType.IDENT,
            TokenType.COMMA,
            TokenType.IDENT,
            TokenType.RPAREN,
            TokenType.LBRACE,
            TokenType.IDENT,
            TokenType.PLUS,
            TokenType.IDENT,
            TokenType.SEMICOLON,
            TokenType.RBRACE,
            TokenType.EOF,
        ]

    def test_eof_repeats(self):
        """Once the input is used up the lexer keeps returning EOF."""
        lexer = Lexer("x")
        assert lexer.next_token().type == TokenType.IDENT
        assert lexer.next_token().type == TokenType.EOF
        assert lexer.next_token().type == TokenType.EOF

    def test_iteration_is_lazy_and_stops_at_eof(self):
        """Iterating a lexer yields tokens up to and including EOF."""
        tokens = list(Lexer("a b"))
        assert [t.type for t in tokens] == [TokenType.IDENT, TokenType.IDENT, TokenType.EOF]


class TestOperators:
    """Test operator and delimiter tokens."""

    @pytest.mark.parametrize("source,expected", [
        ("=", TokenType.ASSIGN),
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        ("!", TokenType.BANG),
        ("*", TokenType.ASTERISK),
        ("/", TokenType.SLASH),
        ("<", TokenType.LT),
        (">", TokenType.GT),
        ("==", TokenType.EQ),
        ("!=", TokenType.NOT_EQ),
        (",", TokenType.COMMA),
        (";", TokenType.SEMICOLON),
        (":", TokenType.COLON),
        ("(", TokenType.LPAREN),
        (")", TokenType.RPAREN),
        ("{", TokenType.LBRACE),
        ("}", TokenType.RBRACE),
        ("[", TokenType.LBRACKET),
        ("]", TokenType.RBRACKET),
    ])
    def test_single_operator(self, source, expected):
        """Each operator produces its token with the source text as literal."""
        token = tokenize(source)[0]
        assert token.type == expected
        assert token.literal == source

    def test_operator_run(self):
        """Adjacent one-character operators are separate tokens."""
        assert types_of("!-/*5;") == [
            TokenType.BANG,
            TokenType.MINUS,
            TokenType.SLASH,
            TokenType.ASTERISK,
            TokenType.INT,
            TokenType.SEMICOLON,
            TokenType.EOF,
        ]

    def test_two_character_operators(self):
        """== and != are single tokens."""
        assert types_of("10 == 10; 10 != 9;") == [
            TokenType.INT, TokenType.EQ, TokenType.INT, TokenType.SEMICOLON,
            TokenType.INT, TokenType.NOT_EQ, TokenType.INT, TokenType.SEMICOLON,
            TokenType.EOF,
        ]

    def test_assign_then_bang(self):
        """`= !` is two tokens, not `=!`."""
        assert types_of("= !") == [TokenType.ASSIGN, TokenType.BANG, TokenType.EOF]


class TestKeywordsAndIdentifiers:
    """Test keyword recognition."""

    @pytest.mark.parametrize("word,expected", [
        ("fn", TokenType.FUNCTION),
        ("let", TokenType.LET),
        ("true", TokenType.TRUE),
        ("false", TokenType.FALSE),
        ("if", TokenType.IF),
        ("else", TokenType.ELSE),
        ("return", TokenType.RETURN),
    ])
    def test_keyword(self, word, expected):
        assert lookup_ident(word) == expected
        assert tokenize(word)[0].type == expected

    def test_identifier_with_digits_and_underscores(self):
        """Identifiers may contain digits after the first character."""
        token = tokenize("foo_bar123")[0]
        assert token.type == TokenType.IDENT
        assert token.literal == "foo_bar123"

    def test_keyword_prefix_is_identifier(self):
        """`letter` is an identifier, not `let` followed by `ter`."""
        tokens = tokenize("letter")
        assert tokens[0].type == TokenType.IDENT
        assert tokens[0].literal == "letter"

    def test_number_then_identifier(self):
        tokens = tokenize("5abc")
        assert [(t.type, t.literal) for t in tokens[:2]] == [
            (TokenType.INT, "5"),
            (TokenType.IDENT, "abc"),
        ]


class TestStrings:
    """Test string literals."""

    def test_string_literal(self):
        """The literal excludes the quotes."""
        token = tokenize('"foo bar"')[0]
        assert token.type == TokenType.STRING
        assert token.literal == "foo bar"

    def test_empty_string(self):
        token = tokenize('""')[0]
        assert token.type == TokenType.STRING
        assert token.literal == ""

    def test_no_escape_sequences(self):
        """A backslash is an ordinary character."""
        token = tokenize(r'"a\nb"')[0]
        assert token.literal == "a\\nb"

    def test_unterminated_string(self):
        """An unterminated string is ILLEGAL and keeps the partial text."""
        tokens = tokenize('"abc')
        assert tokens[0].type == TokenType.ILLEGAL
        assert tokens[0].literal == "abc"
        assert tokens[-1].type == TokenType.EOF


class TestIllegalInput:
    """The lexer reports bad input as tokens instead of raising."""

    def test_unknown_character(self):
        tokens = tokenize("@")
        assert tokens[0].type == TokenType.ILLEGAL
        assert tokens[0].literal == "@"

    def test_lex_stops_at_first_illegal(self):
        """lex() returns tokens up to and including the first ILLEGAL."""
        tokens = lex("let @ x")
        assert [t.type for t in tokens] == [TokenType.LET, TokenType.ILLEGAL]

    def test_lex_without_illegal_ends_with_eof(self):
        tokens = lex("x + 1")
        assert tokens[-1].type == TokenType.EOF
        assert len(tokens) == 4


class TestPositions:
    """Test source positions."""

    def test_position_tracking(self):
        """Token positions are 1-indexed lines and columns."""
        tokens = tokenize("let x = 5;")
        assert tokens[0].span.start.line == 1
        assert tokens[0].span.start.column == 1
        assert tokens[1].span.start.column == 5
        assert tokens[1].span.start.offset == 4

    def test_multiline_position_tracking(self):
        """Position tracking across multiple lines."""
        tokens = tokenize("let x = 5;\nlet y = 10;")
        let_tokens = [t for t in tokens if t.type == TokenType.LET]
        assert let_tokens[0].span.start.line == 1
        assert let_tokens[1].span.start.line == 2
        assert let_tokens[1].span.start.column == 1

    def test_filename_in_location(self):
        tokens = tokenize("x", filename="prog.mk")
        assert str(tokens[0].span.start) == "prog.mk:1:1"

    def test_get_source_line(self):
        lexer = Lexer("first\nsecond")
        assert lexer.get_source_line(2) == "second"
        assert lexer.get_source_line(3) is None
