"""
cursor.py

Character-level reader for slideshow description files.

Public API
----------
Cursor(text)
    .at_end() / .peek() / .advance() / .advance_n(n)
    .skip_whitespace(newlines)
    .expect(text)              → consume literal or raise ParseError
    .try_consume_word(word)    → keyword match with word-boundary check
    .read_float() / .read_vec2() / .read_quoted_string()
    .read_assigned_float() / .read_assigned_vec2()

Every failure raises ParseError stamped with the 1-based line and column
where the cursor stood.
"""

from __future__ import annotations

from typing import NamedTuple

END_SENTINEL = "\0"


class Vec2(NamedTuple):
    x: float
    y: float


class ParseError(Exception):
    """Grammar violation at a known position in the description."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(message, line, column)
        self.message = message
        self.line    = line
        self.column  = column

    def __str__(self) -> str:
        return f"At {self.line}:{self.column}, {self.message}"


def _is_word_char(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or ("0" <= c <= "9")


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


# ── cursor ─────────────────────────────────────────────────────────────────
class Cursor:
    def __init__(self, text: str):
        self.text     = text
        self.position = 0
        self.end      = len(text)
        self.line     = 1
        self.column   = 1

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.line, self.column)

    # ── primitives -------------------------------------------------------
    def at_end(self) -> bool:
        return self.position >= self.end

    def peek(self) -> str:
        return self.text[self.position] if self.position < self.end else END_SENTINEL

    def advance(self) -> str:
        if self.position >= self.end:
            raise self.error("reached end of file")

        c = self.text[self.position]
        self.position += 1
        if c == "\n":
            self.line  += 1
            self.column = 1
        else:
            self.column += 1
        return c

    def advance_n(self, count: int) -> None:
        for _ in range(count):
            self.advance()

    def skip_whitespace(self, newlines: bool = False) -> None:
        while not self.at_end():
            c = self.peek()
            if c == " " or (newlines and c == "\n"):
                self.advance()
            elif c == "\r" and self.text.startswith("\n", self.position + 1):
                # CRLF: the \r belongs to the line ending
                self.advance()
            else:
                return

    def startswith(self, text: str) -> bool:
        return self.text.startswith(text, self.position)

    def expect(self, text: str) -> None:
        if not self.startswith(text):
            if text == "\n":
                raise self.error("expected newline")
            raise self.error(f"expected '{text}'")
        self.advance_n(len(text))

    def try_consume_word(self, word: str) -> bool:
        """
        Consume *word* only if it is a whole token: the character after it
        must be end-of-input or non-alphanumeric ("image" never matches the
        start of "imageDir"). Position is untouched on failure.
        """
        if not self.startswith(word):
            return False
        after = self.position + len(word)
        if after < self.end and _is_word_char(self.text[after]):
            return False
        self.advance_n(len(word))
        return True

    # ── value readers ----------------------------------------------------
    def read_float(self) -> float:
        """Decimal number: optional '-', digits, optional '.' and fraction."""
        negative = False
        if self.peek() == "-":
            self.advance()
            negative = True

        value = 0.0
        valid = False
        while not self.at_end() and _is_digit(self.peek()):
            valid = True
            value = value * 10 + (ord(self.advance()) - ord("0"))

        if not valid:
            raise self.error("expected number")

        if self.peek() == ".":
            self.advance()
            mul = 0.1
            while not self.at_end() and _is_digit(self.peek()):
                value += (ord(self.advance()) - ord("0")) * mul
                mul *= 0.1

        return -value if negative else value

    def read_vec2(self) -> Vec2:
        x = self.read_float()
        self.skip_whitespace()
        self.expect(",")
        self.skip_whitespace()
        y = self.read_float()
        return Vec2(x, y)

    def read_quoted_string(self) -> str:
        self.expect('"')
        start = self.position
        while not self.at_end():
            if self.peek() == '"':
                value = self.text[start:self.position]
                self.advance()
                return value
            self.advance()
        raise self.error("expected '\"'")

    def _assignment(self) -> None:
        self.skip_whitespace()
        self.expect("=")
        self.skip_whitespace()

    def read_assigned_float(self) -> float:
        self._assignment()
        value = self.read_float()
        self.skip_whitespace()
        return value

    def read_assigned_vec2(self) -> Vec2:
        self._assignment()
        value = self.read_vec2()
        self.skip_whitespace()
        return value

    def read_assigned_string(self) -> str:
        self._assignment()
        value = self.read_quoted_string()
        self.skip_whitespace()
        return value
