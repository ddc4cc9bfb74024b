"""
Obstacle event sources.

There is no real detector: a source produces the next (distance, direction)
pair to announce. Sources are injected so tests can script them.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from constants import OBSTACLE_DIRECTIONS, OBSTACLE_MAX_DISTANCE_M, OBSTACLE_MIN_DISTANCE_M


@dataclass(frozen=True)
class ObstacleEvent:
    """Strings, because they are only ever formatted into speech."""
    distance_m: str
    direction: str


class ObstacleEventSource(ABC):
    @abstractmethod
    def next_event(self) -> ObstacleEvent:
        raise NotImplementedError


class RandomObstacleSource(ObstacleEventSource):
    """Uniform direction and whole-meter distance."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def next_event(self) -> ObstacleEvent:
        direction = self._rng.choice(OBSTACLE_DIRECTIONS)
        distance = self._rng.randint(OBSTACLE_MIN_DISTANCE_M, OBSTACLE_MAX_DISTANCE_M)
        return ObstacleEvent(distance_m=str(distance), direction=direction)


class ScriptedObstacleSource(ObstacleEventSource):
    """Replays a fixed sequence, cycling when exhausted."""

    def __init__(self, events: Iterable[ObstacleEvent]) -> None:
        self._events = tuple(events)
        if not self._events:
            raise ValueError("ScriptedObstacleSource needs at least one event")
        self._index = 0

    def next_event(self) -> ObstacleEvent:
        event = self._events[self._index % len(self._events)]
        self._index += 1
        return event
