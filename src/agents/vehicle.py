"""Vehicle tokens queued at the intersection."""
from __future__ import annotations

from dataclasses import dataclass, field

from src.map.approaches import Approach, TurnType, classify_turn


@dataclass
class Vehicle:
    """A queued vehicle identified only by its id, route and wait counter.

    ``turn_value`` is derived from the route once, at creation. The wait
    counter grows by one for every step the vehicle spends in a lane.
    """

    vehicle_id: str
    start_road: Approach
    end_road: Approach
    waiting_for: int = 0
    turn_value: TurnType = field(init=False)

    def __post_init__(self) -> None:
        self.turn_value = classify_turn(self.start_road, self.end_road)

    @property
    def uses_left_lane(self) -> bool:
        return self.turn_value.uses_left_lane

    def wait(self) -> None:
        self.waiting_for += 1
