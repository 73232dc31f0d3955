"""Approach roads of a four-way intersection and turn classification.

Assumptions
-----------
- The four approaches are numbered clockwise starting at north, so the
  difference between the exit and entry ordinals identifies the movement.
- A vehicle leaving on the road it arrived from is a U-turn. It is accepted
  and routed like a left turn.
"""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Tuple


class Approach(str, Enum):
    """One of the four roads meeting at the intersection."""

    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def ordinal(self) -> int:
        return APPROACH_ORDER.index(self)


# Fixed iteration order for release and tie-breaking.
APPROACH_ORDER: Tuple[Approach, ...] = (
    Approach.NORTH,
    Approach.EAST,
    Approach.SOUTH,
    Approach.WEST,
)


class TurnType(IntEnum):
    U_TURN = 0
    LEFT = 1
    STRAIGHT = 2
    RIGHT = 3

    @property
    def uses_left_lane(self) -> bool:
        return self in (TurnType.U_TURN, TurnType.LEFT)


def classify_turn(start_road: Approach, end_road: Approach) -> TurnType:
    """Return the movement a vehicle makes travelling from ``start_road`` to ``end_road``."""

    return TurnType((end_road.ordinal - start_road.ordinal + 4) % 4)
