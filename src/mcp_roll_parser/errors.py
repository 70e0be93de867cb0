from __future__ import annotations


class DiceError(ValueError):
    """User-facing parse errors (fail-fast, no partial request)."""

    code = "UNPARSEABLE_INPUT"

    def __init__(
        self,
        message: str,
        *,
        text: str = "",
        position: int = 0,
        expected: tuple[str, ...] = (),
    ) -> None:
        self.text = text
        self.position = position
        self.expected = expected
        super().__init__(f"[{self.code}] {message}")


class UnexpectedToken(DiceError):
    code = "UNEXPECTED_TOKEN"


class IncompleteRequest(DiceError):
    code = "INCOMPLETE_REQUEST"


class MixedValueList(DiceError):
    code = "MIXED_VALUE_LIST"


class TrailingInput(DiceError):
    code = "TRAILING_INPUT"
