"""
Turn a free-text court announcement into an ordered list of item numbers.

Court masters type the day's sequence by hand, so the input mixes prose
with numbers and ranges:

    "SEQUENCE WOULD BE ITEM NOS. 5 TO 15, THEREAFTER 40, 41 AND 60 ONWARDS"
        → [5, 6, ..., 15, 40, 41, 60, 61, ..., 5000]

The parser is permissive about words (anything unrecognized is skipped)
and exact about numbers: ranges keep their direction, "ONWARDS" expands
to a fixed cap, and each item appears once at its first position.

The noise vocabulary lives in SequenceVocabulary so it can be extended
without touching the scanning logic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

# ─── Vocabulary ──────────────────────────────────────────────────────

# Whole phrases that carry no sequence information (timings, room changes).
_PHRASE_PATTERNS: tuple[str, ...] = (r"COURT WILL SIT AT[^\n]*",)

# Connective words. Order matters: longer forms must precede their prefixes
# (THEREAFTER before THEN, FRESH PASSOVER before FRESH).
_NOISE_PATTERNS: tuple[str, ...] = (
    r"SEQUENCE",
    r"WOULD BE",
    r"ITEM NOS?\.?",
    r"ITEMS?\.?",
    r"PASS ?OVER IF ANY",
    r"THEREAFTER",
    r"THEN",
    r"AND",
    r"FRESH ?PASSOVER",
    r"FRESH",
)

_PUNCTUATION = ",:.;@()[]{}|/\\"

# Upper bound for an open-ended "<n> ONWARDS" range. Explicit "<a> TO <b>"
# ranges are not capped: both ends are stated by the court.
ONWARDS_CAP = 5000

_NUMBER = re.compile(r"[0-9]+")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SequenceVocabulary:
    """Words and symbols the parser treats as noise, plus the range keywords."""

    phrase_patterns: tuple[str, ...] = _PHRASE_PATTERNS
    noise_patterns: tuple[str, ...] = _NOISE_PATTERNS
    punctuation: str = _PUNCTUATION
    range_word: str = "TO"
    onwards_word: str = "ONWARDS"
    onwards_cap: int = ONWARDS_CAP

    def extend(self, *noise_patterns: str) -> SequenceVocabulary:
        """Return a copy with extra noise patterns appended."""
        return SequenceVocabulary(
            phrase_patterns=self.phrase_patterns,
            noise_patterns=self.noise_patterns + noise_patterns,
            punctuation=self.punctuation,
            range_word=self.range_word,
            onwards_word=self.onwards_word,
            onwards_cap=self.onwards_cap,
        )


DEFAULT_VOCABULARY = SequenceVocabulary()


@lru_cache(maxsize=8)
def _compile(vocabulary: SequenceVocabulary) -> tuple[re.Pattern[str], ...]:
    """Compile (phrases, noise words, punctuation) once per vocabulary."""
    phrases = re.compile("|".join(vocabulary.phrase_patterns), re.IGNORECASE)
    noise = re.compile("|".join(vocabulary.noise_patterns), re.IGNORECASE)
    punctuation = re.compile("[" + re.escape(vocabulary.punctuation) + "]")
    return phrases, noise, punctuation


# ─── Cleanup ─────────────────────────────────────────────────────────


def clean_message(
    message: str, vocabulary: SequenceVocabulary = DEFAULT_VOCABULARY
) -> str:
    """Upper-case the message and reduce it to space-separated tokens.

    Example:
        "Sequence would be item nos. 5 to 7, then 9"  →  "5 TO 7 9"
    """
    phrases, noise, punctuation = _compile(vocabulary)
    text = message.upper()
    if vocabulary.phrase_patterns:
        text = phrases.sub(" ", text)
    if vocabulary.noise_patterns:
        text = noise.sub(" ", text)
    text = punctuation.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def _as_item(token: str | None) -> int | None:
    """Read a token as an item number; None for words and unconvertible digit runs."""
    if token is None or _NUMBER.fullmatch(token) is None:
        return None
    try:
        return int(token)
    except ValueError:
        # Longer than the interpreter's int string conversion limit
        return None


# ─── Main Parser ─────────────────────────────────────────────────────


def parse_sequence(
    message: str | None, vocabulary: SequenceVocabulary = DEFAULT_VOCABULARY
) -> list[int]:
    """Parse a court message into a deduplicated, ordered list of item numbers.

    Args:
        message: Raw court message, e.g. "Item Nos. 15 to 5 then 30 onwards".
        vocabulary: Noise words and range keywords to use.

    Returns:
        Item numbers in first-seen order. Empty if the message has no numbers.

    Algorithm:
        Scan tokens left to right with up to two tokens of lookahead:
        - "<n> ONWARDS"  → n, n+1, ..., onwards_cap
        - "<a> TO <b>"   → a..b inclusive, descending when a > b
        - "<n>"          → n
        - anything else  → skipped
        Then drop repeats, keeping the first occurrence.
    """
    cleaned = clean_message(message or "", vocabulary)
    if not cleaned:
        return []

    tokens = cleaned.split(" ")
    items: list[int] = []
    i = 0

    while i < len(tokens):
        token = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None
        after = tokens[i + 2] if i + 2 < len(tokens) else None

        start = _as_item(token)
        if start is None:
            i += 1
            continue

        end = _as_item(after) if following == vocabulary.range_word else None

        if following == vocabulary.onwards_word:
            items.extend(range(start, vocabulary.onwards_cap + 1))
            i += 2
        elif end is not None:
            step = 1 if start <= end else -1
            items.extend(range(start, end + step, step))
            i += 3
        else:
            items.append(start)
            i += 1

    return list(dict.fromkeys(items))
