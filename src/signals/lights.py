"""Phase scheduling state machine for a dual-lane four-way intersection.

The scheduler owns which phase currently holds right-of-way. A phase keeps
its green for at least ``min_green_steps - 1`` steps that had departures,
unless it is about to run empty. Handing over takes one step during which
the outgoing phase shows yellow and the incoming phase shows red-yellow; the
swap itself happens on the following step.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Optional

from src.map.intersection import Intersection
from src.signals.priority import best_phase, phase_scores, pressure
from src.signals.states import Phase, SignalState

logger = logging.getLogger(__name__)

MIN_GREEN_STEPS = 5


class SchedulerMode(str, Enum):
    UNINITIALIZED = "uninitialized"
    STEADY_GREEN = "steady_green"
    TRANSITIONING = "transitioning"


class SchedulerAction(str, Enum):
    """Outcome of one call to :meth:`PhaseScheduler.evaluate`."""

    HOLD = "hold"
    EXTEND = "extend"
    BEGIN_TRANSITION = "begin_transition"
    COMPLETE_TRANSITION = "complete_transition"


@dataclass
class PhaseScheduler:
    """Right-of-way state for one intersection run."""

    min_green_steps: int = MIN_GREEN_STEPS
    current_phase: Optional[Phase] = None
    cycle_elapsed: int = 0

    @property
    def initialized(self) -> bool:
        return self.current_phase is not None

    def mode(self, intersection: Intersection) -> SchedulerMode:
        if self.current_phase is None:
            return SchedulerMode.UNINITIALIZED
        if intersection.has_light(SignalState.YELLOW):
            return SchedulerMode.TRANSITIONING
        return SchedulerMode.STEADY_GREEN

    def _grant(self, intersection: Intersection, phase: Phase) -> None:
        intersection.reset_lights()
        intersection.set_phase_lights(phase, SignalState.GREEN)
        self.current_phase = phase
        self.cycle_elapsed = 0

    def initialize(self, intersection: Intersection) -> Phase:
        """Give green to the best scoring phase on the first step of a run."""

        phase = best_phase(intersection)
        self._grant(intersection, phase)
        logger.debug("Initial green: %s", phase.value)
        return phase

    def record_departures(self, count: int) -> None:
        # Idle steps do not use up the minimum green.
        if count > 0:
            self.cycle_elapsed += 1

    def evaluate(self, intersection: Intersection) -> SchedulerAction:
        """Decide whether to hold, extend, start or finish a phase change.

        Must run after the step's departures have been released, on a
        scheduler that has already been through :meth:`initialize`.
        """

        if intersection.has_light(SignalState.YELLOW):
            incoming = best_phase(intersection)
            previous = self.current_phase
            self._grant(intersection, incoming)
            logger.debug("Light changed from %s to %s", previous.value, incoming.value)
            return SchedulerAction.COMPLETE_TRANSITION

        current = self.current_phase
        renewal_due = self.cycle_elapsed >= self.min_green_steps - 1
        current_pressure = pressure(intersection, current)
        if not (renewal_due or current_pressure <= 1):
            return SchedulerAction.HOLD

        best = best_phase(intersection)
        logger.debug(
            "Phase scores: %s",
            {phase.value: score for phase, score in phase_scores(intersection).items()},
        )

        if best is current and renewal_due:
            logger.debug("Extending %s for another %d steps", current.value, self.min_green_steps)
            self.cycle_elapsed = 0
            return SchedulerAction.EXTEND

        if best is not current or current_pressure == 0:
            if pressure(intersection, best) > 0:
                intersection.reset_lights()
                intersection.set_phase_lights(current, SignalState.YELLOW)
                intersection.set_phase_lights(best, SignalState.REDYELLOW)
                logger.debug("Preparing to change from %s to %s", current.value, best.value)
                return SchedulerAction.BEGIN_TRANSITION

        return SchedulerAction.HOLD
