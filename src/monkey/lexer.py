"""
Lexer for the Monkey language.

Converts source text into a lazily produced stream of tokens for the parser.
The lexer never raises: anything it cannot make sense of (an unknown
character, an unterminated string) becomes an ILLEGAL token and the parser
reports it.

Usage:
    lexer = Lexer(source_code)
    tokens = lexer.tokenize()

Or for streaming:
    for token in Lexer(source_code):
        process(token)
"""

from typing import Iterator, List, Optional

from .tokens import Token, TokenType, SourceLocation, SourceSpan, lookup_ident


# Single-character tokens that never need lookahead
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.ASTERISK,
    '/': TokenType.SLASH,
    '<': TokenType.LT,
    '>': TokenType.GT,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    ':': TokenType.COLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
}


class Lexer:
    """Tokenizer with one character of lookahead."""

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek().isspace():
            self._advance()

    def _make_token(self, token_type: TokenType, literal: str,
                    start: SourceLocation) -> Token:
        return Token(token_type, literal, SourceSpan(start, self._location()))

    def _scan_string(self, start: SourceLocation) -> Token:
        """Scan a double-quoted string. There are no escape sequences."""
        self._advance()  # opening quote
        chars = []
        while not self._is_at_end() and self._peek() != '"':
            chars.append(self._advance())

        if self._is_at_end():
            return self._make_token(TokenType.ILLEGAL, ''.join(chars), start)

        self._advance()  # closing quote
        return self._make_token(TokenType.STRING, ''.join(chars), start)

    def _scan_number(self, start: SourceLocation) -> Token:
        while '0' <= self._peek() <= '9':
            self._advance()
        return self._make_token(TokenType.INT, self.source[start.offset:self.pos], start)

    def _scan_identifier_or_keyword(self, start: SourceLocation) -> Token:
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        lexeme = self.source[start.offset:self.pos]
        return self._make_token(lookup_ident(lexeme), lexeme, start)

    def next_token(self) -> Token:
        """Scan the next token. Returns EOF forever once the input is used up."""
        self._skip_whitespace()
        start = self._location()

        if self._is_at_end():
            return self._make_token(TokenType.EOF, "", start)

        ch = self._peek()

        if ch == '"':
            return self._scan_string(start)
        if '0' <= ch <= '9':
            return self._scan_number(start)
        if ch.isalpha() or ch == '_':
            return self._scan_identifier_or_keyword(start)

        self._advance()

        # Two-character operators
        if ch == '=' and self._peek() == '=':
            self._advance()
            return self._make_token(TokenType.EQ, "==", start)
        if ch == '!' and self._peek() == '=':
            self._advance()
            return self._make_token(TokenType.NOT_EQ, "!=", start)
        if ch == '=':
            return self._make_token(TokenType.ASSIGN, ch, start)
        if ch == '!':
            return self._make_token(TokenType.BANG, ch, start)

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch], ch, start)

        return self._make_token(TokenType.ILLEGAL, ch, start)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list ending with EOF."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for diagnostics

    Returns:
        List of tokens, the last one being EOF
    """
    return Lexer(source, filename).tokenize()


def lex(source: str) -> List[Token]:
    """Tokens up to and including the first EOF or ILLEGAL token.

    Handy when eyeballing what the lexer makes of a snippet.
    """
    tokens = []
    for token in Lexer(source):
        tokens.append(token)
        if token.type == TokenType.ILLEGAL:
            break
    return tokens
