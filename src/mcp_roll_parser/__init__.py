from .errors import DiceError, IncompleteRequest, MixedValueList, TrailingInput, UnexpectedToken
from .formatting import format_request, request_to_dict
from .parser import parse_request

__all__ = [
    "DiceError",
    "IncompleteRequest",
    "MixedValueList",
    "TrailingInput",
    "UnexpectedToken",
    "format_request",
    "parse_request",
    "request_to_dict",
]
