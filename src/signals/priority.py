"""Score the four phases from the vehicles currently queued in their lanes.

Each queued vehicle contributes the square of its wait, so a few long-waiting
vehicles outweigh many fresh arrivals.
"""
from __future__ import annotations

from typing import Dict

from src.map.intersection import Intersection
from src.signals.states import PHASE_ORDER, Phase


def phase_score(intersection: Intersection, phase: Phase) -> int:
    return sum(
        vehicle.waiting_for ** 2
        for lane in intersection.lanes_for(phase)
        for vehicle in lane
    )


def phase_scores(intersection: Intersection) -> Dict[Phase, int]:
    return {phase: phase_score(intersection, phase) for phase in PHASE_ORDER}


def best_phase(intersection: Intersection) -> Phase:
    """Return the highest scoring phase; ties resolve to the earliest in ``PHASE_ORDER``."""

    scores = phase_scores(intersection)
    best = PHASE_ORDER[0]
    best_score = scores[best]
    for phase in PHASE_ORDER[1:]:
        if scores[phase] > best_score:
            best, best_score = phase, scores[phase]
    return best


def pressure(intersection: Intersection, phase: Phase) -> int:
    """Longest queue among the phase's two lanes."""

    return max(len(lane) for lane in intersection.lanes_for(phase))
