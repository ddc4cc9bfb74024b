# pylint: disable=missing-module-docstring,missing-function-docstring
import pytest

from feedback.classifier import classify
from feedback.enums.command import Command


@pytest.mark.parametrize(
    ("utterance", "expected"),
    [
        ("start", Command.START),
        ("please begin now", Command.START),
        ("  STOP  ", Command.STOP),
        ("pause for a second", Command.STOP),
        ("that is the end", Command.STOP),
        ("scan the room", Command.DETECT),
        ("detect obstacles", Command.DETECT),
        ("I need help", Command.HELP),
        ("can you assist me", Command.HELP),
        ("where am I", Command.DIRECTION),
        ("which direction", Command.DIRECTION),
        ("my location please", Command.DIRECTION),
    ],
)
def test_each_group_is_recognized(utterance: str, expected: Command) -> None:
    assert classify(utterance) is expected


@pytest.mark.parametrize(
    ("utterance", "expected"),
    [
        # Group precedence wins over position in the utterance
        ("stop and start again", Command.START),
        ("please stop, start again", Command.START),
        ("help me scan", Command.DETECT),
        ("where should I stop", Command.STOP),
        ("assist with direction", Command.HELP),
    ],
)
def test_precedence_order(utterance: str, expected: Command) -> None:
    assert classify(utterance) is expected


def test_substring_matching_catches_embedded_keywords() -> None:
    # "restart" contains "start"; "weekend" contains "end"
    assert classify("restart") is Command.START
    assert classify("see you at the weekend") is Command.STOP


@pytest.mark.parametrize("utterance", ["I wonder about the weather", "", "   ", "hello there"])
def test_no_match_is_none(utterance: str) -> None:
    assert classify(utterance) is None
