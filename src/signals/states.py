"""Signal aspects and the four right-of-way phases of a dual-lane intersection."""
from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from src.map.approaches import Approach

NORTH_SOUTH = (Approach.NORTH, Approach.SOUTH)
EAST_WEST = (Approach.EAST, Approach.WEST)


class SignalState(str, Enum):
    RED = "red"
    REDYELLOW = "redyellow"
    YELLOW = "yellow"
    GREEN = "green"

    @property
    def releases(self) -> bool:
        """Whether vehicles facing this aspect may still leave the stop line."""

        return self in (SignalState.GREEN, SignalState.YELLOW)


class Phase(str, Enum):
    """Mutually exclusive right-of-way groups, each spanning two opposite roads."""

    NS_STRAIGHT_RIGHT = "northSouthStraightRight"
    EW_STRAIGHT_RIGHT = "eastWestStraightRight"
    NS_LEFT = "northSouthLeftTurn"
    EW_LEFT = "eastWestLeftTurn"

    @property
    def approaches(self) -> Tuple[Approach, Approach]:
        return _PHASE_APPROACHES[self]

    @property
    def is_left_turn(self) -> bool:
        return self in (Phase.NS_LEFT, Phase.EW_LEFT)

    @property
    def lane(self) -> str:
        return "left_lane" if self.is_left_turn else "right_lane"

    @property
    def light(self) -> str:
        return "left_turn_light" if self.is_left_turn else "main_light"

    @property
    def arrow_approaches(self) -> Tuple[Approach, ...]:
        """Roads granted a permissive right arrow while this phase is not red."""

        if self is Phase.NS_LEFT:
            return EAST_WEST
        if self is Phase.EW_LEFT:
            return NORTH_SOUTH
        return ()


_PHASE_APPROACHES: Dict[Phase, Tuple[Approach, Approach]] = {
    Phase.NS_STRAIGHT_RIGHT: NORTH_SOUTH,
    Phase.EW_STRAIGHT_RIGHT: EAST_WEST,
    Phase.NS_LEFT: NORTH_SOUTH,
    Phase.EW_LEFT: EAST_WEST,
}

# Enumeration order used for scoring; earlier phases win ties.
PHASE_ORDER: Tuple[Phase, ...] = (
    Phase.NS_STRAIGHT_RIGHT,
    Phase.EW_STRAIGHT_RIGHT,
    Phase.NS_LEFT,
    Phase.EW_LEFT,
)
