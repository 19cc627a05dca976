"""
Diagnostics and exceptions.

Parse problems are never raised from the parser. They are collected as
Diagnostic records so that one malformed source can report several
unrelated problems. Exceptions are reserved for callers that refuse to go on
(ParserError) and for faults that are not language-level errors.

Diagnostic codes:
- P001: no prefix parse function for a token
- P002: unexpected token
- P003: unterminated block
- P004: invalid function parameter
- P005: expression nested too deeply
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # P001, P002, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        loc = f"{self.span.start}: " if self.span is not None else ""
        parts.append(f"{loc}{self.severity.value}[{self.code}]: {self.message}")

        if show_source and self.span is not None and self.source_line is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            if self.span.start.line == self.span.end.line:
                end_col = self.span.end.column
            else:
                end_col = len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            data["range"] = {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            }
        return data

    def __str__(self) -> str:
        return self.message


class MonkeyError(Exception):
    """Base exception for the package."""
    pass


class ParserError(MonkeyError):
    """Raised by callers that refuse to evaluate a source with parse errors."""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        count = len(self.diagnostics)
        super().__init__(f"{count} parse error(s)")

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def __str__(self) -> str:
        return "\n\n".join(d.format() for d in self.diagnostics)


class UnknownNodeError(MonkeyError):
    """The evaluator met a node it has no rule for (a malformed AST)."""
    pass


class EvaluationDepthError(MonkeyError):
    """Evaluation recursed deeper than the host or the configuration allows."""
    pass


class ConfigError(MonkeyError):
    """Invalid interpreter configuration."""
    pass


# --- Parser diagnostics ---

def error_no_prefix_parse_fn(literal: str, span: Optional[SourceSpan],
                             source_line: Optional[str] = None) -> Diagnostic:
    """P001: A token that cannot start an expression."""
    return Diagnostic(
        code="P001",
        message=f"no prefix parse function found for {literal}",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )


def error_unexpected_token(expected: str, found: str, span: Optional[SourceSpan],
                           source_line: Optional[str] = None) -> Diagnostic:
    """P002: The next token is not the one the grammar requires."""
    return Diagnostic(
        code="P002",
        message=f"expected next token to be {expected}, got {found} instead",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )


def error_unterminated_block(span: Optional[SourceSpan],
                             source_line: Optional[str] = None) -> Diagnostic:
    """P003: A block ran into the end of input."""
    return Diagnostic(
        code="P003",
        message="expected next token to be }, got EOF instead",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["every '{' opening a block needs a matching '}'"],
    )


def error_invalid_parameter(found: str, span: Optional[SourceSpan],
                            source_line: Optional[str] = None) -> Diagnostic:
    """P004: A function parameter that is not an identifier."""
    return Diagnostic(
        code="P004",
        message=f"expected parameter name, got {found} instead",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )


def error_nesting_too_deep(span: Optional[SourceSpan],
                           source_line: Optional[str] = None) -> Diagnostic:
    """P005: Nesting exhausted the host recursion limit; parsing stops here."""
    return Diagnostic(
        code="P005",
        message="expression nested too deeply",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )


class DiagnosticCollector:
    """Collects diagnostics during parsing."""

    def __init__(self, max_errors: Optional[int] = None):
        self.diagnostics: List[Diagnostic] = []
        self.max_errors = max_errors
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    @property
    def should_stop(self) -> bool:
        """Check if we've hit the max error limit (never, when unlimited)."""
        if self.max_errors is None:
            return False
        return self._error_count >= self.max_errors

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"{self._error_count} error(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
        }
