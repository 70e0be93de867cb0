from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import TypeVar, cast

from .errors import DiceError, IncompleteRequest, MixedValueList, TrailingInput, UnexpectedToken
from .lexer import FUDGE_SYMBOL_RE, IDENTIFIER_RE, PARAM_INT_RE, POSITIVE_INT_RE, NoMatch, Scanner
from .models import (
    Action,
    ActionedDice,
    Aggregation,
    Concat,
    ConstantDice,
    CountedAction,
    DiceSpec,
    Explode,
    Flip,
    FudgeDice,
    FudgeSymbol,
    KeepBest,
    KeepWorst,
    Mult,
    NumberedDice,
    Reroll,
    RerollBest,
    RerollWorst,
    RollRequest,
    RollValue,
    Sum,
    Total,
    ValuesAction,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

_EXAMPLE = "Example: '2D6Sum' or '(heroD20KeepBest(2))x3Total'."


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _describe(expected: tuple[str, ...]) -> str:
    if not expected:
        return "a dice request"
    if len(expected) == 1:
        return expected[0]
    return ", ".join(expected[:-1]) + f" or {expected[-1]}"


class _RequestParser:
    """Single-pass recognizer with ordered choice and furthest-failure reporting.

    Rules raise ``NoMatch`` when they do not apply; the caller restores the
    cursor and tries the next alternative. ``DiceError`` subclasses raised from
    inside a rule are hard failures and end the parse immediately.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.scanner = Scanner(text)
        self.furthest: NoMatch | None = None

    def parse(self) -> RollRequest:
        try:
            return self._request()
        except NoMatch as failure:
            raise self._error(failure) from None

    # -- error wiring -------------------------------------------------------

    def _record(self, failure: NoMatch) -> None:
        self.furthest = failure if self.furthest is None else self.furthest.merge(failure)

    def _error(self, failure: NoMatch) -> DiceError:
        failure = failure if self.furthest is None else self.furthest.merge(failure)
        self.furthest = failure
        position, expected = failure.position, failure.expected

        if position >= len(self.text):
            return IncompleteRequest(
                f"Request ends before {_describe(expected)}. {_EXAMPLE}",
                text=self.text,
                position=position,
                expected=expected,
            )
        return UnexpectedToken(
            f"Unexpected {self.text[position]!r} at position {position}; expected {_describe(expected)}. {_EXAMPLE}",
            text=self.text,
            position=position,
            expected=expected,
        )

    def _trailing(self) -> DiceError:
        position = self.scanner.pos
        if self.furthest is not None and self.furthest.position > position:
            return self._error(self.furthest)

        expected: tuple[str, ...] = ()
        if self.furthest is not None and self.furthest.position == position:
            expected = self.furthest.expected
        expected += ("end of input",)
        return TrailingInput(
            f"Unexpected {self.text[position]!r} at position {position} after a complete request. {_EXAMPLE}",
            text=self.text,
            position=position,
            expected=expected,
        )

    # -- combinators --------------------------------------------------------

    def _attempt(self, rule: Callable[[], T]) -> T | None:
        start = self.scanner.pos
        try:
            return rule()
        except NoMatch as failure:
            self._record(failure)
            self.scanner.pos = start
            return None

    def _first_of(self, *rules: Callable[[], T]) -> T:
        start = self.scanner.pos
        failure = NoMatch(start, ())
        for rule in rules:
            try:
                return rule()
            except NoMatch as exc:
                failure = failure.merge(exc)
                self.scanner.pos = start
        raise failure

    # -- request layer ------------------------------------------------------

    def _request(self) -> RollRequest:
        units = [self._unit()]
        while True:
            unit = self._attempt(self._unit)
            if unit is None:
                break
            units.append(unit)

        actions = self._actions()
        aggregation = self._attempt(self._aggregation)

        self.scanner.skip_spaces()
        if not self.scanner.at_end():
            raise self._trailing()

        return RollRequest(dice=tuple(units), actions=tuple(actions), aggregation=aggregation)

    def _aggregation(self) -> Aggregation:
        self.scanner.skip_spaces()
        self.scanner.expect_keyword("Count")
        return "count"

    # -- dice and group layer -----------------------------------------------

    def _unit(self) -> ActionedDice:
        self.scanner.skip_spaces()
        return self._first_of(self._group, self._bare_dice)

    def _bare_dice(self) -> ActionedDice:
        return ActionedDice(dice=self._dice_spec())

    def _group(self) -> ActionedDice:
        self.scanner.expect_keyword("(")
        self.scanner.skip_spaces()
        start = self.scanner.pos

        # The identifier runs straight into the dice specifier ("heroD20"), so
        # its end is the shortest prefix after which the group body parses.
        # Trailing digits go to the dice count: "(hero_1D6)" is "hero_" + "1D6".
        # A space keeps them in the label: "(hero_1 D6)".
        m = IDENTIFIER_RE.match(self.text, start)
        if m is not None:
            for end in range(start + 3, m.end() + 1):
                unit = self._attempt(partial(self._group_body, self.text[start:end], end))
                if unit is not None:
                    return unit

        return self._group_body(None, start)

    def _group_body(self, identifier: str | None, position: int) -> ActionedDice:
        self.scanner.pos = position
        self.scanner.skip_spaces()
        dice = self._dice_spec()
        actions = self._actions()
        self.scanner.skip_spaces()
        self.scanner.expect_keyword(")")
        return ActionedDice(dice=dice, identifier=identifier, actions=tuple(actions))

    def _dice_spec(self) -> DiceSpec:
        return self._first_of(self._numbered_dice, self._fudge_dice, self._constant_dice)

    def _count(self) -> int:
        count = self.scanner.match_int(POSITIVE_INT_RE, "dice count")
        return count if count is not None else 1

    def _numbered_dice(self) -> NumberedDice:
        count = self._count()
        self.scanner.expect_keyword("D")
        sides = self.scanner.expect_int(POSITIVE_INT_RE, "number of sides")
        return NumberedDice(count=count, sides=sides)

    def _fudge_dice(self) -> FudgeDice:
        count = self._count()
        marker = self.scanner.pos
        self.scanner.expect_keyword("F")
        # 'F' is also the first letter of 'Flip'.
        if _is_ascii_alnum(self.scanner.peek()):
            raise NoMatch(marker, ("'F' followed by a separator",))
        return FudgeDice(count=count)

    def _constant_dice(self) -> ConstantDice:
        self.scanner.expect_keyword("+")
        return ConstantDice(value=self.scanner.expect_int(POSITIVE_INT_RE, "constant value"))

    # -- action layer -------------------------------------------------------

    def _actions(self) -> list[Action]:
        actions: list[Action] = []
        while True:
            action = self._attempt(self._action)
            if action is None:
                return actions
            actions.append(action)

    def _action(self) -> Action:
        self.scanner.skip_spaces()
        return self._first_of(
            partial(self._keyword_action, "Sum", Sum()),
            partial(self._keyword_action, "Flip", Flip()),
            partial(self._keyword_action, "Total", Total()),
            partial(self._keyword_action, "Concat", Concat()),
            self._mult_action,
            partial(self._values_action, "Explode", Explode),
            partial(self._counted_action, "RerollBest", RerollBest),
            partial(self._counted_action, "RerollWorst", RerollWorst),
            partial(self._values_action, "Reroll", Reroll),
            partial(self._counted_action, "KeepBest", KeepBest),
            partial(self._counted_action, "KeepWorst", KeepWorst),
        )

    def _keyword_action(self, keyword: str, action: Action) -> Action:
        self.scanner.expect_keyword(keyword)
        return action

    def _mult_action(self) -> Mult:
        self.scanner.expect_keyword("x")
        return Mult(n=self.scanner.expect_int(PARAM_INT_RE, "multiplier"))

    def _counted_action(self, keyword: str, factory: Callable[[int], CountedAction]) -> CountedAction:
        self.scanner.expect_keyword(f"{keyword}(")
        n = self.scanner.expect_int(PARAM_INT_RE, f"{keyword} parameter")
        self.scanner.expect_keyword(")")
        return factory(n)

    def _values_action(
        self, keyword: str, factory: Callable[[tuple[RollValue, ...]], ValuesAction]
    ) -> ValuesAction:
        self.scanner.expect_keyword(f"{keyword}(")
        return factory(self._roll_values(keyword))

    def _roll_values(self, keyword: str) -> tuple[RollValue, ...]:
        if self.scanner.peek() == ")":
            raise IncompleteRequest(
                f"{keyword}() needs at least one value. Example: '{keyword}(1,2)' or '{keyword}(+,-)'.",
                text=self.text,
                position=self.scanner.pos,
                expected=("roll value",),
            )

        values = [self._roll_value()]
        while True:
            before = self.scanner.pos
            self.scanner.skip_spaces()
            if not self.scanner.match_keyword(","):
                self.scanner.pos = before
                break
            self.scanner.skip_spaces()

            position = self.scanner.pos
            value = self._roll_value()
            if isinstance(value, int) != isinstance(values[0], int):
                raise MixedValueList(
                    f"{keyword}(...) mixes numeric and fudge values at position {position}. "
                    f"Use only numbers ('{keyword}(1,2)') or only fudge faces ('{keyword}(+,-,0)').",
                    text=self.text,
                    position=position,
                    expected=("numeric value" if isinstance(values[0], int) else "fudge value",),
                )
            values.append(value)

        self.scanner.expect_keyword(")")
        return tuple(values)

    def _roll_value(self) -> RollValue:
        value = self.scanner.match_int(POSITIVE_INT_RE, "roll value")
        if value is not None:
            return value
        return cast(FudgeSymbol, self.scanner.expect(FUDGE_SYMBOL_RE, "roll value"))


def parse_request(text: str) -> RollRequest:
    if not text.strip(" "):
        raise IncompleteRequest(
            f"Empty input. {_EXAMPLE}",
            text=text,
            position=len(text),
            expected=("dice specifier", "'('"),
        )

    request = _RequestParser(text).parse()
    logger.debug(
        "Parsed %r into %d dice unit(s), %d action(s)", text, len(request.dice), len(request.actions)
    )
    return request
