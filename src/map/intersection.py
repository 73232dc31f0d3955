"""Data model for a single signalized four-way intersection.

Assumptions
-----------
- Every approach road has exactly two FIFO lanes: a protected left-turn lane
  (left turns and U-turns) and a through lane (straight and right turns).
- Each road carries a main light, a left-turn light and a permissive right
  arrow. The arrow is independent of the main light.
- A single-lane intersection is the special case where the left lanes stay
  empty; it needs no separate model.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterator, List, Tuple

from src.agents.vehicle import Vehicle
from src.map.approaches import APPROACH_ORDER, Approach
from src.signals.states import Phase, SignalState

Lane = Deque[Vehicle]


@dataclass
class Road:
    """One approach road: its two lanes and its signal heads."""

    approach: Approach
    left_lane: Lane = field(default_factory=deque)
    right_lane: Lane = field(default_factory=deque)
    main_light: SignalState = SignalState.RED
    left_turn_light: SignalState = SignalState.RED
    right_arrow: bool = False

    def lane_for(self, vehicle: Vehicle) -> Lane:
        return self.left_lane if vehicle.uses_left_lane else self.right_lane

    @property
    def vehicle_count(self) -> int:
        return len(self.left_lane) + len(self.right_lane)

    def vehicles(self) -> Iterator[Vehicle]:
        yield from self.left_lane
        yield from self.right_lane

    def reset_lights(self) -> None:
        self.main_light = SignalState.RED
        self.left_turn_light = SignalState.RED
        self.right_arrow = False


class Intersection:
    """Four roads keyed by approach, always iterated in ``APPROACH_ORDER``."""

    def __init__(self) -> None:
        self.roads: Dict[Approach, Road] = {
            approach: Road(approach) for approach in APPROACH_ORDER
        }

    def __iter__(self) -> Iterator[Road]:
        for approach in APPROACH_ORDER:
            yield self.roads[approach]

    def road(self, approach: Approach) -> Road:
        return self.roads[Approach(approach)]

    def add_vehicle(self, vehicle_id: str, start_road: Approach, end_road: Approach) -> Vehicle:
        """Create a vehicle and append it to the tail of the lane its turn selects.

        Duplicate ids and U-turns are accepted as given.
        """

        vehicle = Vehicle(
            vehicle_id=vehicle_id,
            start_road=Approach(start_road),
            end_road=Approach(end_road),
        )
        self.road(vehicle.start_road).lane_for(vehicle).append(vehicle)
        return vehicle

    def vehicles(self) -> Iterator[Vehicle]:
        for road in self:
            yield from road.vehicles()

    @property
    def vehicle_count(self) -> int:
        return sum(road.vehicle_count for road in self)

    def age_vehicles(self) -> None:
        for vehicle in self.vehicles():
            vehicle.wait()

    def lanes_for(self, phase: Phase) -> Tuple[Lane, Lane]:
        first, second = phase.approaches
        return getattr(self.roads[first], phase.lane), getattr(self.roads[second], phase.lane)

    def reset_lights(self) -> None:
        for road in self:
            road.reset_lights()

    def set_phase_lights(self, phase: Phase, state: SignalState) -> None:
        """Drive both of ``phase``'s signal heads to ``state``.

        Left-turn phases also grant the perpendicular roads their right
        arrow whenever ``state`` is not red.
        """

        for approach in phase.approaches:
            setattr(self.roads[approach], phase.light, state)
        if state is not SignalState.RED:
            for approach in phase.arrow_approaches:
                self.roads[approach].right_arrow = True

    def phase_state(self, phase: Phase) -> SignalState:
        return getattr(self.roads[phase.approaches[0]], phase.light)

    def has_light(self, state: SignalState) -> bool:
        return any(road.main_light is state or road.left_turn_light is state for road in self)

    def queue_lengths(self) -> Dict[str, int]:
        lengths: Dict[str, int] = {}
        for road in self:
            lengths[f"{road.approach.value}.left"] = len(road.left_lane)
            lengths[f"{road.approach.value}.right"] = len(road.right_lane)
        return lengths

    def describe(self) -> List[Dict]:
        """Serializable view of every road's lights and queued vehicle ids."""

        return [
            {
                "road": road.approach.value,
                "mainLight": road.main_light.value,
                "leftTurnLight": road.left_turn_light.value,
                "rightArrow": road.right_arrow,
                "leftLane": [v.vehicle_id for v in road.left_lane],
                "rightLane": [v.vehicle_id for v in road.right_lane],
            }
            for road in self
        ]
