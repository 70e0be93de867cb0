from __future__ import annotations

import re

from .errors import UnexpectedToken


POSITIVE_INT_RE = re.compile(r"[1-9][0-9]*")
# Action parameters may be zero; leading zeros are still rejected.
PARAM_INT_RE = re.compile(r"0(?![0-9])|[1-9][0-9]*")
IDENTIFIER_RE = re.compile(r"[A-Za-z]{3}[A-Za-z0-9_]*")
FUDGE_SYMBOL_RE = re.compile(r"[+\-0]")


class NoMatch(Exception):
    """Raised when a rule does not match at the cursor. Never leaves the parser."""

    def __init__(self, position: int, expected: tuple[str, ...]) -> None:
        super().__init__(position, expected)
        self.position = position
        self.expected = expected

    def merge(self, other: NoMatch) -> NoMatch:
        if other.position > self.position:
            return other
        if other.position < self.position:
            return self
        expected = self.expected + tuple(e for e in other.expected if e not in self.expected)
        return NoMatch(self.position, expected)


class Scanner:
    """Cursor over a single request string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_spaces(self) -> None:
        # Only the plain space is a separator; tabs and newlines are not.
        while self.peek() == " ":
            self.pos += 1

    def match(self, pattern: re.Pattern[str]) -> str | None:
        m = pattern.match(self.text, self.pos)
        if m is None:
            return None
        self.pos = m.end()
        return m.group()

    def expect(self, pattern: re.Pattern[str], expected: str) -> str:
        token = self.match(pattern)
        if token is None:
            raise NoMatch(self.pos, (expected,))
        return token

    def match_keyword(self, keyword: str) -> bool:
        end = self.pos + len(keyword)
        if self.text[self.pos:end].lower() != keyword.lower():
            return False
        self.pos = end
        return True

    def expect_keyword(self, keyword: str) -> None:
        if not self.match_keyword(keyword):
            raise NoMatch(self.pos, (f"'{keyword}'",))

    def match_int(self, pattern: re.Pattern[str], expected: str) -> int | None:
        start = self.pos
        token = self.match(pattern)
        return None if token is None else self._to_int(token, start, expected)

    def expect_int(self, pattern: re.Pattern[str], expected: str) -> int:
        start = self.pos
        return self._to_int(self.expect(pattern, expected), start, expected)

    def _to_int(self, token: str, start: int, expected: str) -> int:
        try:
            return int(token)
        except ValueError:
            # Beyond the interpreter's int/str conversion digit limit.
            raise UnexpectedToken(
                f"Number at position {start} has too many digits ({len(token)}). Example: '2D6' or 'x3'.",
                text=self.text,
                position=start,
                expected=(expected,),
            ) from None
