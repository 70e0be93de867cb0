from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias


FudgeSymbol: TypeAlias = Literal["+", "-", "0"]
RollValue: TypeAlias = int | FudgeSymbol
Aggregation: TypeAlias = Literal["count"]


@dataclass(frozen=True)
class NumberedDice:
    sides: int
    count: int = 1


@dataclass(frozen=True)
class FudgeDice:
    count: int = 1


@dataclass(frozen=True)
class ConstantDice:
    value: int


DiceSpec: TypeAlias = NumberedDice | FudgeDice | ConstantDice


@dataclass(frozen=True)
class Sum:
    pass


@dataclass(frozen=True)
class Flip:
    pass


@dataclass(frozen=True)
class Total:
    pass


@dataclass(frozen=True)
class Concat:
    pass


@dataclass(frozen=True)
class Mult:
    n: int


@dataclass(frozen=True)
class KeepBest:
    n: int


@dataclass(frozen=True)
class KeepWorst:
    n: int


@dataclass(frozen=True)
class RerollBest:
    n: int


@dataclass(frozen=True)
class RerollWorst:
    n: int


@dataclass(frozen=True)
class Reroll:
    values: tuple[RollValue, ...]


@dataclass(frozen=True)
class Explode:
    values: tuple[RollValue, ...]


CountedAction: TypeAlias = Mult | KeepBest | KeepWorst | RerollBest | RerollWorst
ValuesAction: TypeAlias = Reroll | Explode
Action: TypeAlias = Sum | Flip | Total | Concat | CountedAction | ValuesAction


@dataclass(frozen=True)
class ActionedDice:
    """One request unit: a bare dice specifier or a ``(...)`` group.

    ``actions`` apply left-to-right to this unit's own rolls only.
    """

    dice: DiceSpec
    identifier: str | None = None
    actions: tuple[Action, ...] = ()


@dataclass(frozen=True)
class RollRequest:
    dice: tuple[ActionedDice, ...]
    actions: tuple[Action, ...] = ()
    aggregation: Aggregation | None = None
