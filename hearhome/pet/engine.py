"""Pet attribute engine: actions and periodic decay.

Every attribute is an integer in [0, 100]. Intimacy is a positive modifier:
it scales up action gains (up to +50%) and scales down decay (up to -33%).
Both transforms are pure and clamp their result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

ATTR_MIN = 0
ATTR_MAX = 100

# Threshold below which low hydration/energy hurts health, and health hurts mood
LOW_THRESHOLD = 30
POOR_HEALTH_THRESHOLD = 40
HIGH_INTIMACY_THRESHOLD = 70


def _clamp(value: int) -> int:
    return max(ATTR_MIN, min(ATTR_MAX, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (12.5 -> 13).

    Python's round() would give 12 (banker's rounding).
    """
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class Attributes:
    mood: int = 50
    health: int = 80
    energy: int = 60
    hydration: int = 60  # plants lean on this one
    intimacy: int = 50

    def clamp(self) -> Attributes:
        return Attributes(
            mood=_clamp(self.mood),
            health=_clamp(self.health),
            energy=_clamp(self.energy),
            hydration=_clamp(self.hydration),
            intimacy=_clamp(self.intimacy),
        )


class ActionType(str, Enum):
    FEED = "feed"  # energy+, mood+
    WATER = "water"  # hydration+, health+
    TREAT = "treat"  # health+
    PLAY = "play"  # mood++, energy-


def apply_action(attrs: Attributes, action: ActionType) -> Attributes:
    """Apply a user action and return the clamped result."""
    factor = 1.0 + attrs.intimacy / 200.0
    mood, health, energy, hydration, intimacy = (
        attrs.mood,
        attrs.health,
        attrs.energy,
        attrs.hydration,
        attrs.intimacy,
    )

    if action is ActionType.FEED:
        energy += round_half_up(12 * factor)
        mood += round_half_up(6 * factor)
    elif action is ActionType.WATER:
        hydration += round_half_up(14 * factor)
        health += round_half_up(5 * factor)
    elif action is ActionType.TREAT:
        health += round_half_up(15 * factor)
        mood += round_half_up(3 * factor)
    elif action is ActionType.PLAY:
        mood += round_half_up(10 * factor)
        energy -= 6
        intimacy += 5
    else:
        raise ValueError(f"Unknown action: {action!r}")

    return Attributes(mood, health, energy, hydration, intimacy).clamp()


def tick_decay(attrs: Attributes) -> Attributes:
    """One periodic tick of natural decay. Intimacy itself never changes here."""
    reducer = 1.0 - attrs.intimacy / 300.0
    mood, health, energy, hydration = attrs.mood, attrs.health, attrs.energy, attrs.hydration

    energy -= round_half_up(4 * reducer)
    hydration -= round_half_up(3 * reducer)

    # Health declines when hydration or energy run low (post-decay values)
    if hydration < LOW_THRESHOLD:
        health -= round_half_up(4 * reducer)
    if energy < LOW_THRESHOLD:
        health -= round_half_up(3 * reducer)

    if attrs.intimacy > HIGH_INTIMACY_THRESHOLD:
        mood += 1
    if health < POOR_HEALTH_THRESHOLD:
        mood -= 2

    return Attributes(mood, health, energy, hydration, attrs.intimacy).clamp()


def set_intimacy(attrs: Attributes, value: int) -> Attributes:
    """Replace intimacy (relationship changes in the space) and clamp."""
    return replace(attrs, intimacy=value).clamp()
