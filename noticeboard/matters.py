"""
Parse the user's tracked-matters text into Matter objects.

Accepted input is a comma- or newline-separated list of "<court>/<item>":

    "C1/12, 3/40
     rc1/7"          →  [Matter(1, 12), Matter(3, 40), Matter(RC1, 7)]

Malformed entries are dropped, never reported back to the user.
"""

from __future__ import annotations

import logging
import re

from .exceptions import MatterParseError
from .models import Matter

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,\n]")
_COURT_PREFIX = re.compile(r"^C", re.IGNORECASE)
_ITEM = re.compile(r"\d+")


def normalize_court(raw: str) -> str:
    """Canonicalize a court reference: "c07" → "7", "Rc1" → "RC1"."""
    court = _COURT_PREFIX.sub("", raw.strip()).upper()
    if court.isascii() and court.isdigit():
        return court.lstrip("0") or "0"
    return court


def parse_matter(token: str) -> Matter:
    """Parse one "<court>/<item>" token.

    Raises:
        MatterParseError: If the token has no item number or no court.
    """
    court_raw, sep, item_raw = token.partition("/")
    item_raw = item_raw.strip()
    if not sep or not _ITEM.fullmatch(item_raw):
        raise MatterParseError(
            f"Expected <court>/<item>, got {token!r}", details={"token": token}
        )

    court = normalize_court(court_raw)
    if not court:
        raise MatterParseError(f"Missing court in {token!r}", details={"token": token})

    try:
        item = int(item_raw)
    except ValueError as e:
        raise MatterParseError(
            f"Item number too long in {token!r}", details={"token": token}
        ) from e

    return Matter(court=court, item=item)


def parse_matters(text: str | None) -> list[Matter]:
    """Parse every token in the tracked-matters text, dropping invalid ones."""
    matters: list[Matter] = []
    for token in _SEPARATORS.split(text or ""):
        token = token.strip()
        if not token:
            continue
        try:
            matters.append(parse_matter(token))
        except MatterParseError as e:
            logger.debug("Dropping tracked matter %r: %s", token, e)
    return matters
