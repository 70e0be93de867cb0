from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import settings
from .errors import DiceError
from .formatting import format_request, request_to_dict
from .parser import parse_request


logger = logging.getLogger(__name__)

mcp = FastMCP(settings.server_name)


@mcp.tool()
def parse_roll_request(text: str) -> dict[str, Any]:
    """Parse a dice-roll request such as '2D6Sum' or '(heroD20KeepBest(2))x3Total'.

    Input: text (string)
    Output: structured JSON describing the dice, actions and aggregation

    Nothing is rolled. Raises a hard error (exception) on invalid input.
    """

    try:
        request = parse_request(text)
    except DiceError as e:
        logger.info("Rejected roll request %r at position %d: %s", text, e.position, e)
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None

    return {
        "input": text,
        "normalized_expression": format_request(request),
        "request": request_to_dict(request),
    }


def run() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s on %s transport", settings.server_name, settings.transport)
    mcp.run(transport=settings.transport)


if __name__ == "__main__":
    run()
