from __future__ import annotations

from typing import Any

from .models import (
    Action,
    ActionedDice,
    Concat,
    ConstantDice,
    DiceSpec,
    Explode,
    Flip,
    FudgeDice,
    KeepBest,
    KeepWorst,
    Mult,
    NumberedDice,
    Reroll,
    RerollBest,
    RerollWorst,
    RollRequest,
    Sum,
    Total,
)


_ACTION_NAMES: dict[type, str] = {
    Sum: "Sum",
    Flip: "Flip",
    Total: "Total",
    Concat: "Concat",
    Mult: "Mult",
    KeepBest: "KeepBest",
    KeepWorst: "KeepWorst",
    RerollBest: "RerollBest",
    RerollWorst: "RerollWorst",
    Reroll: "Reroll",
    Explode: "Explode",
}


def format_dice(dice: DiceSpec) -> str:
    if isinstance(dice, NumberedDice):
        return f"{dice.count}D{dice.sides}"
    if isinstance(dice, FudgeDice):
        return f"{dice.count}F"
    return f"+{dice.value}"


def format_action(action: Action) -> str:
    name = _ACTION_NAMES[type(action)]
    if isinstance(action, Mult):
        return f"x{action.n}"
    if isinstance(action, (KeepBest, KeepWorst, RerollBest, RerollWorst)):
        return f"{name}({action.n})"
    if isinstance(action, (Reroll, Explode)):
        return f"{name}({','.join(str(v) for v in action.values)})"
    return name


def format_unit(unit: ActionedDice) -> str:
    if unit.identifier is None and not unit.actions:
        return format_dice(unit.dice)

    parts: list[str] = []
    if unit.identifier is not None:
        parts.append(unit.identifier)
    parts.append(format_dice(unit.dice))
    parts.extend(format_action(a) for a in unit.actions)
    return "(" + " ".join(parts) + ")"


def format_request(request: RollRequest) -> str:
    """Render the canonical notation for a parsed request.

    Tokens are separated by single spaces so that a fudge die is never glued
    to a following keyword and an identifier never merges with a dice count.
    Parsing the result gives back an equal ``RollRequest``.
    """

    chunks = [format_unit(u) for u in request.dice]
    chunks.extend(format_action(a) for a in request.actions)
    if request.aggregation == "count":
        chunks.append("Count")
    return " ".join(chunks)


def _dice_to_dict(dice: DiceSpec) -> dict[str, Any]:
    if isinstance(dice, NumberedDice):
        return {"type": "numbered", "count": dice.count, "sides": dice.sides}
    if isinstance(dice, FudgeDice):
        return {"type": "fudge", "count": dice.count}
    if isinstance(dice, ConstantDice):
        return {"type": "constant", "value": dice.value}
    raise TypeError(f"Unknown dice specifier: {dice!r}")


def _action_to_dict(action: Action) -> dict[str, Any]:
    out: dict[str, Any] = {"action": _ACTION_NAMES[type(action)]}
    if isinstance(action, (Mult, KeepBest, KeepWorst, RerollBest, RerollWorst)):
        out["n"] = action.n
    elif isinstance(action, (Reroll, Explode)):
        out["values"] = list(action.values)
    return out


def request_to_dict(request: RollRequest) -> dict[str, Any]:
    return {
        "dice": [
            {
                "identifier": unit.identifier,
                "spec": _dice_to_dict(unit.dice),
                "actions": [_action_to_dict(a) for a in unit.actions],
            }
            for unit in request.dice
        ],
        "actions": [_action_to_dict(a) for a in request.actions],
        "aggregation": request.aggregation,
    }
