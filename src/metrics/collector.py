"""Collects metrics about vehicle waits, throughput, and queue lengths."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from statistics import mean
from typing import Deque, Dict, List, Optional


@dataclass
class MetricSnapshot:
    """Roll-up of simulation metrics for charting and monitoring."""

    step: int
    current_phase: Optional[str]
    average_wait: float
    max_wait: int
    completed_departures: int
    queued_vehicles: int
    throughput_per_window: int
    average_queue_length: float
    max_queue_length: int
    queue_lengths: Dict[str, int]


@dataclass
class MetricsCollector:
    """Tracks departures and lane queue lengths across steps."""

    window: int = 120
    wait_times: Deque[int] = field(default_factory=lambda: deque(maxlen=5000))
    throughput: Deque[int] = field(default_factory=lambda: deque(maxlen=240))
    queue_history: Deque[Dict[str, int]] = field(default_factory=lambda: deque(maxlen=240))
    completed_departures: int = 0

    _departures_this_step: int = 0

    def on_departure(self, waited: int) -> None:
        self.wait_times.append(waited)
        self.completed_departures += 1
        self._departures_this_step += 1

    def record_queues(self, queue_lengths: Dict[str, int]) -> None:
        self.queue_history.append(dict(queue_lengths))

    def finalize_step(self) -> None:
        self.throughput.append(self._departures_this_step)
        self._departures_this_step = 0

    def _average_wait(self) -> float:
        return mean(self.wait_times) if self.wait_times else 0.0

    def _average_queue_length(self) -> float:
        if not self.queue_history:
            return 0.0
        totals: List[int] = []
        for snapshot in self.queue_history:
            totals.extend(snapshot.values())
        return mean(totals) if totals else 0.0

    def _max_queue_length(self) -> int:
        max_lengths = [max(snapshot.values()) for snapshot in self.queue_history if snapshot]
        return max(max_lengths) if max_lengths else 0

    def _throughput_per_window(self) -> int:
        recent = list(self.throughput)[-max(self.window, 1):]
        return sum(recent)

    def _queue_lengths(self) -> Dict[str, int]:
        if not self.queue_history:
            return {}
        return dict(self.queue_history[-1])

    def snapshot(self, *, step: int, current_phase: Optional[str] = None) -> MetricSnapshot:
        latest = self._queue_lengths()
        return MetricSnapshot(
            step=step,
            current_phase=current_phase,
            average_wait=self._average_wait(),
            max_wait=max(self.wait_times) if self.wait_times else 0,
            completed_departures=self.completed_departures,
            queued_vehicles=sum(latest.values()),
            throughput_per_window=self._throughput_per_window(),
            average_queue_length=self._average_queue_length(),
            max_queue_length=self._max_queue_length(),
            queue_lengths=latest,
        )
