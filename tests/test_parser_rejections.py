import pytest

from mcp_roll_parser.errors import (
    DiceError,
    IncompleteRequest,
    MixedValueList,
    TrailingInput,
    UnexpectedToken,
)
from mcp_roll_parser.parser import parse_request


@pytest.mark.parametrize(
    ("text", "prefix"),
    [
        ("", "[INCOMPLETE_REQUEST]"),
        ("   ", "[INCOMPLETE_REQUEST]"),
        ("2D", "[INCOMPLETE_REQUEST]"),
        ("5", "[INCOMPLETE_REQUEST]"),
        ("+", "[INCOMPLETE_REQUEST]"),
        ("(D6", "[INCOMPLETE_REQUEST]"),
        ("(heroD6 Sum", "[INCOMPLETE_REQUEST]"),
        ("2D6 x", "[INCOMPLETE_REQUEST]"),
        ("2D6 2D", "[INCOMPLETE_REQUEST]"),
        ("2D6Reroll()", "[INCOMPLETE_REQUEST]"),
        ("2D6Explode()", "[INCOMPLETE_REQUEST]"),
        ("2D6Reroll(1,+)", "[MIXED_VALUE_LIST]"),
        ("4F Explode(-, 3)", "[MIXED_VALUE_LIST]"),
        ("2D6Reroll(1,0)", "[MIXED_VALUE_LIST]"),
        ("Da", "[UNEXPECTED_TOKEN]"),
        ("F8", "[UNEXPECTED_TOKEN]"),
        ("0D6", "[UNEXPECTED_TOKEN]"),
        ("5D 20", "[UNEXPECTED_TOKEN]"),
        ("1FlipSum", "[UNEXPECTED_TOKEN]"),
        ("4FFlip", "[UNEXPECTED_TOKEN]"),
        ("2D6 KeepBest( 2)", "[UNEXPECTED_TOKEN]"),
        ("+8+", "[INCOMPLETE_REQUEST]"),
        ("D8D", "[INCOMPLETE_REQUEST]"),
        ("2+8", "[UNEXPECTED_TOKEN]"),
        ("8+", "[UNEXPECTED_TOKEN]"),
        ("2D6 KeepBest(02)", "[UNEXPECTED_TOKEN]"),
        ("2D6x03", "[UNEXPECTED_TOKEN]"),
        ("1" * 5000 + "D6", "[UNEXPECTED_TOKEN]"),
        ("2D6 garbage", "[TRAILING_INPUT]"),
        ("2D6\tSum", "[TRAILING_INPUT]"),
        ("2D6 Count Sum", "[TRAILING_INPUT]"),
    ],
)
def test_parse_rejections(text, prefix):
    with pytest.raises(DiceError) as exc:
        parse_request(text)
    assert str(exc.value).startswith(prefix)


def test_trailing_input_reports_position():
    with pytest.raises(TrailingInput) as exc:
        parse_request("2D6 garbage")
    assert exc.value.position == 4
    assert exc.value.text == "2D6 garbage"
    assert "end of input" in exc.value.expected


def test_incomplete_request_points_at_end_of_input():
    with pytest.raises(IncompleteRequest) as exc:
        parse_request("3D")
    assert exc.value.position == 2
    assert exc.value.expected == ("number of sides",)


def test_unexpected_token_reports_furthest_failure():
    with pytest.raises(UnexpectedToken) as exc:
        parse_request("2D6 KeepBest(x)")
    assert exc.value.position == 13


def test_mixed_value_list_points_at_offending_value():
    with pytest.raises(MixedValueList) as exc:
        parse_request("2D6Reroll(1, +)")
    assert exc.value.position == 13


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_request("2D6 garbage")


@pytest.mark.parametrize(
    ("text", "position"),
    [
        ("1" * 5000 + "D6", 0),
        ("2D" + "7" * 5000, 2),
        ("2D6x" + "9" * 5000, 4),
        ("2D6Reroll(" + "5" * 5000 + ")", 10),
    ],
)
def test_oversized_numbers_are_reported_as_parse_errors(text, position):
    with pytest.raises(UnexpectedToken) as exc:
        parse_request(text)
    assert exc.value.position == position


@pytest.mark.parametrize(("text", "position"), [("2D6x03", 4), ("2D6 KeepBest(02)", 13)])
def test_leading_zero_parameters_fail_at_the_zero(text, position):
    with pytest.raises(UnexpectedToken) as exc:
        parse_request(text)
    assert exc.value.position == position
