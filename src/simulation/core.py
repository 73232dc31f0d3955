"""Step engine for the intersection simulation.

Assumptions
-----------
- Time advances in discrete steps driven by the caller; nothing runs between
  calls and a step always runs to completion.
- Within a step vehicles age first, then the scheduler is initialized if this
  is the first step, then departures are released, and finally the scheduler
  decides whether to change phase.
- One simulation owns one intersection and one scheduler. Independent runs
  share no state.

Default parameters mirror the standard controller: a five step minimum green
and a two minute metrics window. They can be overridden via configuration
files or constructor arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple
import json
import logging

import yaml

from src.agents.vehicle import Vehicle
from src.map.approaches import Approach, TurnType
from src.map.intersection import Intersection, Road
from src.signals.lights import MIN_GREEN_STEPS, PhaseScheduler, SchedulerAction

logger = logging.getLogger(__name__)


def check_log_level(level) -> str:
    """Normalize a logging level name, rejecting names the logging module does not know."""

    name = str(level).upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"Unknown log level: {level!r}")
    return name


@dataclass
class SimulationConfig:
    """Tunable parameters for one simulation run."""

    min_green_steps: int = MIN_GREEN_STEPS
    metrics_window: int = 120
    log_level: str = "INFO"

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "SimulationConfig":
        """Build a configuration object from a dictionary-like source."""

        config = cls(
            min_green_steps=int(mapping.get("min_green_steps", cls.min_green_steps)),
            metrics_window=int(mapping.get("metrics_window", cls.metrics_window)),
            log_level=check_log_level(mapping.get("log_level", cls.log_level)),
        )
        if config.min_green_steps < 1:
            raise ValueError("min_green_steps must be at least 1.")
        return config


def load_config(path: str | Path) -> SimulationConfig:
    """Load simulation configuration from a JSON or YAML file."""

    path = Path(path)
    content = path.read_text()
    if path.suffix.lower() in {".yml", ".yaml"}:
        mapping = yaml.safe_load(content)
    else:
        mapping = json.loads(content)

    if not isinstance(mapping, Mapping):
        raise ValueError("Configuration file must contain a mapping at the top level.")

    return SimulationConfig.from_mapping(mapping)


class IntersectionSimulation:
    """Drive an :class:`Intersection` one discrete step at a time."""

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.intersection = Intersection()
        self.scheduler = PhaseScheduler(min_green_steps=self.config.min_green_steps)
        self.step_count = 0
        self.last_action: Optional[SchedulerAction] = None
        self.last_departed: Tuple[Vehicle, ...] = ()

    def add_vehicle(self, vehicle_id: str, start_road: Approach, end_road: Approach) -> Vehicle:
        vehicle = self.intersection.add_vehicle(vehicle_id, start_road, end_road)
        logger.debug(
            "Adding vehicle %s from %s to %s (%s)",
            vehicle_id,
            vehicle.start_road.value,
            vehicle.end_road.value,
            vehicle.turn_value.name,
        )
        return vehicle

    def _release(self, road: Road) -> List[Vehicle]:
        departed: List[Vehicle] = []
        if road.left_turn_light.releases and road.left_lane:
            departed.append(road.left_lane.popleft())
        if road.main_light.releases and road.right_lane:
            departed.append(road.right_lane.popleft())
        # The arrow looks at whichever vehicle is at the front after the main light.
        if road.right_arrow and road.right_lane and road.right_lane[0].turn_value is TurnType.RIGHT:
            departed.append(road.right_lane.popleft())
        return departed

    def step(self) -> List[str]:
        """Advance one step and return the ids of departed vehicles in departure order."""

        self.intersection.age_vehicles()

        if not self.scheduler.initialized:
            self.scheduler.initialize(self.intersection)

        departed: List[Vehicle] = []
        for road in self.intersection:
            departed.extend(self._release(road))

        for vehicle in departed:
            logger.debug(
                "Vehicle %s left %s (waited %d steps)",
                vehicle.vehicle_id,
                vehicle.start_road.value,
                vehicle.waiting_for,
            )

        self.scheduler.record_departures(len(departed))
        self.last_action = self.scheduler.evaluate(self.intersection)
        self.last_departed = tuple(departed)
        self.step_count += 1
        return [vehicle.vehicle_id for vehicle in departed]
