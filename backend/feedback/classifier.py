"""
Utterance → command classification.

Recognized speech is noisy and often wrapped in filler ("please start now"),
so matching is by substring, not by whole word or exact phrase. Groups are
tested in a fixed precedence order and the first group with any keyword
present wins, regardless of where in the utterance that keyword appears:
"stop and start again" classifies as START.
"""

from __future__ import annotations

from typing import Final, Tuple

from constants import (
    KEYWORDS_DETECT,
    KEYWORDS_DIRECTION,
    KEYWORDS_HELP,
    KEYWORDS_START,
    KEYWORDS_STOP,
)
from feedback.enums.command import Command


KEYWORD_TABLE: Final[Tuple[tuple[Command, Tuple[str, ...]], ...]] = (
    (Command.START, KEYWORDS_START),
    (Command.STOP, KEYWORDS_STOP),
    (Command.DETECT, KEYWORDS_DETECT),
    (Command.HELP, KEYWORDS_HELP),
    (Command.DIRECTION, KEYWORDS_DIRECTION),
)


def normalize(utterance: str) -> str:
    return utterance.lower().strip()


def classify(utterance: str) -> Command | None:
    """
    Return the command for an utterance, or None when nothing matches.

    None must be dropped silently by the caller.
    """
    text = normalize(utterance)
    if not text:
        return None

    for command, keywords in KEYWORD_TABLE:
        if any(keyword in text for keyword in keywords):
            return command
    return None
