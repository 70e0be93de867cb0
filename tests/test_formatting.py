import pytest

from mcp_roll_parser.formatting import format_request, request_to_dict
from mcp_roll_parser.parser import parse_request


@pytest.mark.parametrize(
    ("text", "normalized_expression"),
    [
        ("D6", "1D6"),
        ("2d6sum", "2D6 Sum"),
        ("(heroD20KeepBest(2))x3Total", "(hero 1D20 KeepBest(2)) x3 Total"),
        ("4F reroll(+, -)", "4F Reroll(+,-)"),
        ("+5 2d6 count", "+5 2D6 Count"),
        ("(D8)", "1D8"),
        ("(4F Sum)Concat", "(4F Sum) Concat"),
    ],
)
def test_format_request(text, normalized_expression):
    assert format_request(parse_request(text)) == normalized_expression


@pytest.mark.parametrize(
    "text",
    [
        "2D6Sum",
        "(ogreD20KeepBest(2))x3Total",
        "(hero2D6 Explode(6))(abcF2 3F RerollWorst(1)) Flip",
        "(abcD6 1D6 Sum)",
        "10F Reroll(-,0) Explode(+) Count",
        "+3 D4 x0 KeepWorst(1) RerollBest(2) Concat",
    ],
)
def test_reparse_of_normalized_expression_is_stable(text):
    parsed = parse_request(text)
    assert parse_request(format_request(parsed)) == parsed


def test_request_to_dict():
    parsed = parse_request("(heroD20KeepBest(2)) 4F Reroll(+,-) Count")
    assert request_to_dict(parsed) == {
        "dice": [
            {
                "identifier": "hero",
                "spec": {"type": "numbered", "count": 1, "sides": 20},
                "actions": [{"action": "KeepBest", "n": 2}],
            },
            {
                "identifier": None,
                "spec": {"type": "fudge", "count": 4},
                "actions": [],
            },
        ],
        "actions": [{"action": "Reroll", "values": ["+", "-"]}],
        "aggregation": "count",
    }
