"""
Parser for enumeration declaration source.

Grammar:

    file        := declaration*
    declaration := attribute* visibility? "enum" IDENT "{" variants "}"
    visibility  := "pub" ("(" ... ")")?
    variants    := (variant ("," variant)* ","?)?
    variant     := attribute* IDENT ("(" ... ")" | "{" ... "}")? ("=" expr)?
    attribute   := "#" "[" path ("(" ... ")" | "=" ...)? "]" | DOC_COMMENT

Attribute arguments and discriminant expressions are captured as raw
source text; interpreting them is left to the transformation pipeline.
Outer doc comments become 'doc' attributes carrying the comment text.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from . import ir
from .errors import ParseError, make_parse_error
from .lexer import Token, TokenType, tokenize

logger = logging.getLogger(__name__)

DOC_ATTRIBUTE = "doc"

_CLOSERS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}


class DeclarationParser:
    """
    Recursive descent parser producing EnumDeclaration IR.

    Token navigation follows the usual current/peek/advance/expect pattern.
    """

    def __init__(self, tokens: list[Token], text: str, file: Path):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            text: The source text the tokens came from
            file: Source file path (for error reporting)
        """
        self.tokens = tokens
        self.text = text
        self.file = file
        self.pos = 0

    # === Token navigation ===

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check whether the current token is one of the given types."""
        return self.current_token().type in token_types

    def expect(self, token_type: TokenType, what: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            found = token.value or token.type.value
            raise self.error(f"Expected {what or token_type.value}, got '{found}'", token)
        return self.advance()

    def error(self, message: str, token: Token | None = None) -> ParseError:
        token = token or self.current_token()
        return make_parse_error(
            message, self.file, token.line, token.column, snippet=self._line_of(token)
        )

    def location(self, token: Token) -> ir.SourceLocation:
        return ir.SourceLocation(file=str(self.file), line=token.line, column=token.column)

    def _line_of(self, token: Token) -> str:
        lines = self.text.splitlines()
        if 0 < token.line <= len(lines):
            return lines[token.line - 1]
        return ""

    def skip_balanced(self) -> tuple[int, int]:
        """
        Consume a bracketed group starting at the current opening token.

        Returns:
            Source offsets of the group's contents (excluding the brackets)
        """
        opener = self.advance()
        stack = [_CLOSERS[opener.type]]
        start = opener.end

        while stack:
            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.error(f"Unclosed '{opener.value}'", opener)
            if token.type in _CLOSERS:
                stack.append(_CLOSERS[token.type])
            elif token.type == stack[-1]:
                stack.pop()
            elif token.type in _CLOSERS.values():
                raise self.error(f"Unexpected '{token.value}'", token)
            self.advance()

        closer = self.tokens[self.pos - 1]
        return start, closer.start

    def capture_expression(self) -> str:
        """Capture raw text up to the next top-level ',' or the closing '}'."""
        start_token = self.current_token()
        depth = 0

        while True:
            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.error("Unexpected end of input in discriminant", start_token)
            if depth == 0 and token.type in (TokenType.COMMA, TokenType.RBRACE):
                break
            if token.type == TokenType.DOC_COMMENT:
                raise self.error("Doc comments are not allowed in a discriminant", token)
            if token.type in _CLOSERS:
                depth += 1
            elif token.type in _CLOSERS.values():
                depth -= 1
            self.advance()

        if self.current_token() is start_token:
            raise self.error("Expected discriminant expression", start_token)

        end = self.tokens[self.pos - 1].end
        return " ".join(self.text[start_token.start : end].split())

    # === Grammar ===

    def parse_file(self) -> list[ir.EnumDeclaration]:
        """Parse every declaration until end of input."""
        declarations: list[ir.EnumDeclaration] = []
        while not self.match(TokenType.EOF):
            declarations.append(self.parse_declaration())
        return declarations

    def parse_declaration(self) -> ir.EnumDeclaration:
        """Parse one enum declaration with its attributes."""
        start = self.current_token()
        attributes = self.parse_attributes()
        visibility = self.parse_visibility()

        self.expect(TokenType.ENUM, "'enum'")
        name_token = self.expect(TokenType.IDENTIFIER, "enum name")
        self.expect(TokenType.LBRACE, "'{'")

        variants: list[ir.Variant] = []
        while not self.match(TokenType.RBRACE):
            variants.append(self.parse_variant())
            if not self.match(TokenType.RBRACE):
                self.expect(TokenType.COMMA, "',' or '}'")
        self.advance()

        try:
            declaration = ir.EnumDeclaration(
                name=name_token.value,
                visibility=visibility,
                attributes=attributes,
                variants=variants,
                location=self.location(start),
            )
        except PydanticValidationError as e:
            raise self.error(_first_error(e), name_token) from e

        logger.debug(f"Parsed enum {declaration.name} with {len(variants)} variant(s)")
        return declaration

    def parse_visibility(self) -> str:
        """Parse an optional visibility marker, returned as written."""
        if not self.match(TokenType.PUB):
            return ""
        self.advance()
        if not self.match(TokenType.LPAREN):
            return "pub"
        start, end = self.skip_balanced()
        inner = " ".join(self.text[start:end].split())
        return f"pub({inner})"

    def parse_attributes(self) -> list[ir.Attribute]:
        """Parse zero or more outer attributes."""
        attributes: list[ir.Attribute] = []
        while self.match(TokenType.HASH, TokenType.DOC_COMMENT):
            if self.match(TokenType.DOC_COMMENT):
                attributes.append(self.parse_doc_comment())
            else:
                attributes.append(self.parse_attribute())
        return attributes

    def parse_doc_comment(self) -> ir.Attribute:
        token = self.advance()
        if token.value.startswith(("//!", "/*!")):
            raise self.error("Inner attributes are not supported here", token)
        if token.value.startswith("///"):
            text = token.value[3:]
        else:
            text = token.value[3:-2]
        return ir.Attribute(
            name=DOC_ATTRIBUTE, args=json.dumps(text.strip()), location=self.location(token)
        )

    def parse_attribute(self) -> ir.Attribute:
        hash_token = self.advance()
        if self.match(TokenType.BANG):
            raise self.error("Inner attributes are not supported here")
        self.expect(TokenType.LBRACKET, "'['")

        path = [self.expect(TokenType.IDENTIFIER, "attribute name").value]
        while self.match(TokenType.COLON):
            self.advance()
            self.expect(TokenType.COLON, "'::'")
            path.append(self.expect(TokenType.IDENTIFIER, "attribute path segment").value)

        args = ""
        if self.match(TokenType.LPAREN):
            start, end = self.skip_balanced()
            args = " ".join(self.text[start:end].split())
        elif self.match(TokenType.EQUALS):
            self.advance()
            first = self.current_token()
            while not self.match(TokenType.RBRACKET, TokenType.EOF):
                self.advance()
            args = self.text[first.start : self.current_token().start].strip()

        self.expect(TokenType.RBRACKET, "']'")
        return ir.Attribute(name="::".join(path), args=args, location=self.location(hash_token))

    def parse_variant(self) -> ir.Variant:
        """Parse one variant with its attributes, payload, and discriminant."""
        attributes = self.parse_attributes()
        name_token = self.expect(TokenType.IDENTIFIER, "variant name")

        shape = ir.VariantShape.UNIT
        if self.match(TokenType.LPAREN):
            self.skip_balanced()
            shape = ir.VariantShape.TUPLE
        elif self.match(TokenType.LBRACE):
            self.skip_balanced()
            shape = ir.VariantShape.STRUCT

        discriminant = None
        if self.match(TokenType.EQUALS):
            self.advance()
            discriminant = self.capture_expression()

        try:
            return ir.Variant(
                name=name_token.value,
                discriminant=discriminant,
                shape=shape,
                attributes=attributes,
                location=self.location(name_token),
            )
        except PydanticValidationError as e:
            raise self.error(_first_error(e), name_token) from e


def _first_error(error: PydanticValidationError) -> str:
    message = error.errors()[0]["msg"]
    return message.removeprefix("Value error, ")


def parse_declarations(text: str, file: Path) -> list[ir.EnumDeclaration]:
    """
    Parse declaration source into EnumDeclaration IR.

    Args:
        text: Source text
        file: Source file path (for locations and errors)

    Returns:
        Declarations in source order

    Raises:
        ParseError: On any syntax error
    """
    tokens = tokenize(text, file)
    parser = DeclarationParser(tokens, text, file)
    return parser.parse_file()


_DECLARATIONS = TypeAdapter(list[ir.EnumDeclaration])


def load_declarations(path: Path) -> list[ir.EnumDeclaration]:
    """
    Load declarations from a file.

    JSON files hold one declaration object or a list of them, validated
    against the IR models; any other file is parsed as declaration source.
    """
    text = path.read_text(encoding="utf-8")

    if path.suffix != ".json":
        return parse_declarations(text, path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise make_parse_error(f"Invalid JSON: {e.msg}", path, e.lineno, e.colno) from e

    if isinstance(data, dict):
        data = [data]

    try:
        return _DECLARATIONS.validate_python(data)
    except PydanticValidationError as e:
        raise ParseError(f"{path}: invalid declaration: {e}") from e
