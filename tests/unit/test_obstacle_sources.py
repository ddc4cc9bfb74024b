# pylint: disable=missing-module-docstring,missing-function-docstring
import random

import pytest

from constants import OBSTACLE_DIRECTIONS
from simulation.obstacles import ObstacleEvent, RandomObstacleSource, ScriptedObstacleSource


def test_random_source_stays_in_range() -> None:
    source = RandomObstacleSource(random.Random(7))
    for _ in range(200):
        event = source.next_event()
        assert event.direction in OBSTACLE_DIRECTIONS
        assert 1 <= int(event.distance_m) <= 5


def test_random_source_is_reproducible_with_seeded_rng() -> None:
    first = RandomObstacleSource(random.Random(42))
    second = RandomObstacleSource(random.Random(42))
    assert [first.next_event() for _ in range(10)] == [second.next_event() for _ in range(10)]


def test_scripted_source_cycles() -> None:
    events = [ObstacleEvent("1", "ahead"), ObstacleEvent("2", "behind you")]
    source = ScriptedObstacleSource(events)
    assert [source.next_event() for _ in range(3)] == [events[0], events[1], events[0]]


def test_scripted_source_rejects_empty_script() -> None:
    with pytest.raises(ValueError):
        ScriptedObstacleSource([])
