"""
Lexer/Tokenizer for enumeration declaration source.

Converts raw declaration text into a stream of tokens with source location
tracking. Whitespace and newlines are insignificant; '//' line comments and
'/* */' block comments are skipped. Doc comments ('///', '/**' and their
inner '//!', '/*!' forms) are kept as tokens since they stand for attributes.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import make_parse_error


class TokenType(Enum):
    """Token types in declaration source."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"

    # Keywords
    ENUM = "enum"
    PUB = "pub"

    # Punctuation
    HASH = "#"
    BANG = "!"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    EQUALS = "="
    COLON = ":"

    # Any other single character (operators inside expressions)
    OTHER = "OTHER"

    # Special
    DOC_COMMENT = "DOC_COMMENT"
    EOF = "EOF"


KEYWORDS = {
    "enum": TokenType.ENUM,
    "pub": TokenType.PUB,
}

PUNCTUATION = {
    t.value: t
    for t in (
        TokenType.HASH,
        TokenType.BANG,
        TokenType.LBRACKET,
        TokenType.RBRACKET,
        TokenType.LPAREN,
        TokenType.RPAREN,
        TokenType.LBRACE,
        TokenType.RBRACE,
        TokenType.COMMA,
        TokenType.EQUALS,
        TokenType.COLON,
    )
}

# '=' is only punctuation on its own; '==', '<=', '>=', '!=' stay in expressions
COMPOUND_OPERATORS = ("==", "<=", ">=", "!=", "=>", "<<", ">>", "**")


@dataclass
class Token:
    """
    A single token in declaration source.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        start: Offset of the first character in the source text
        end: Offset just past the last character
    """

    type: TokenType
    value: str
    line: int
    column: int
    start: int
    end: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for enumeration declaration source.

    Converts source text into a flat stream of tokens.
    """

    def __init__(self, text: str, file: Path):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def at_doc_comment(self) -> bool:
        """Check whether a doc comment starts at the current position."""
        text, pos = self.text, self.pos
        if text.startswith(("//!", "/*!"), pos):
            return True
        if text.startswith("///", pos):
            return not text.startswith("////", pos)
        if text.startswith("/**", pos):
            return not text.startswith(("/**/", "/***"), pos)
        return False

    def skip_whitespace_and_comments(self) -> None:
        """Skip whitespace, newlines, and comments, stopping at a doc comment."""
        while True:
            ch = self.current_char()
            if ch is not None and ch.isspace():
                self.advance()
            elif ch == "/" and self.at_doc_comment():
                return
            elif ch == "/" and self.peek_char() == "/":
                while self.current_char() not in (None, "\n"):
                    self.advance()
            elif ch == "/" and self.peek_char() == "*":
                self.skip_block_comment()
            else:
                return

    def skip_block_comment(self) -> None:
        """Skip a (possibly nested) block comment."""
        start_line, start_col = self.line, self.column
        depth = 0
        while True:
            ch = self.current_char()
            if ch is None:
                raise make_parse_error(
                    "Unterminated block comment", self.file, start_line, start_col
                )
            if ch == "/" and self.peek_char() == "*":
                depth += 1
                self.advance()
            elif ch == "*" and self.peek_char() == "/":
                depth -= 1
                self.advance()
                if depth == 0:
                    self.advance()
                    return
            self.advance()

    def read_doc_comment(self) -> str:
        """Read a line or block doc comment, returning it with its markers."""
        start = self.pos
        if self.peek_char() == "/":
            while self.current_char() not in (None, "\n"):
                self.advance()
        else:
            self.skip_block_comment()
        return self.text[start : self.pos]

    def read_word(self) -> str:
        """Read an identifier, keyword, or number (letters, digits, underscores)."""
        start = self.pos
        while (ch := self.current_char()) is not None and (ch.isalnum() or ch == "_"):
            self.advance()
        return self.text[start : self.pos]

    def read_string(self) -> str:
        """Read a double-quoted string, returning it with its quotes."""
        start = self.pos
        start_line, start_col = self.line, self.column
        self.advance()  # opening quote

        while True:
            ch = self.current_char()
            if ch is None:
                raise make_parse_error(
                    "Unterminated string literal", self.file, start_line, start_col
                )
            if ch == "\\":
                self.advance()
                self.advance()
                continue
            self.advance()
            if ch == '"':
                return self.text[start : self.pos]

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: If an unterminated string or comment is found
        """
        while True:
            self.skip_whitespace_and_comments()
            ch = self.current_char()
            if ch is None:
                break

            line, column, start = self.line, self.column, self.pos

            if ch == "/" and self.at_doc_comment():
                comment = self.read_doc_comment()
                self.tokens.append(
                    Token(TokenType.DOC_COMMENT, comment, line, column, start, self.pos)
                )
            elif ch.isalpha() or ch == "_":
                word = self.read_word()
                token_type = KEYWORDS.get(word, TokenType.IDENTIFIER)
                self.tokens.append(Token(token_type, word, line, column, start, self.pos))
            elif ch.isdigit():
                word = self.read_word()
                self.tokens.append(Token(TokenType.NUMBER, word, line, column, start, self.pos))
            elif ch == '"':
                literal = self.read_string()
                self.tokens.append(Token(TokenType.STRING, literal, line, column, start, self.pos))
            elif self.text.startswith(COMPOUND_OPERATORS, self.pos):
                self.advance()
                self.advance()
                value = self.text[start : self.pos]
                self.tokens.append(Token(TokenType.OTHER, value, line, column, start, self.pos))
            elif ch in PUNCTUATION:
                self.advance()
                self.tokens.append(Token(PUNCTUATION[ch], ch, line, column, start, self.pos))
            else:
                self.advance()
                self.tokens.append(Token(TokenType.OTHER, ch, line, column, start, self.pos))

        self.tokens.append(
            Token(TokenType.EOF, "", self.line, self.column, self.pos, self.pos)
        )
        return self.tokens


def tokenize(text: str, file: Path) -> list[Token]:
    """
    Convenience function to tokenize declaration source.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
