from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Dict, List
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from src.map.approaches import Approach
from src.metrics import MetricSnapshot, MetricsCollector
from src.simulation.commands import parse_commands, run_commands
from src.simulation.core import IntersectionSimulation, SimulationConfig

logger = logging.getLogger(__name__)


@dataclass
class SimulationRuntime:
    config: SimulationConfig = field(default_factory=SimulationConfig)
    _simulation: IntersectionSimulation = field(init=False)
    _lock: Lock = field(default_factory=Lock, init=False)
    metrics_history: List[MetricSnapshot] = field(default_factory=list, init=False)
    metrics_collector: MetricsCollector = field(init=False)

    def __post_init__(self) -> None:
        self._start_run()

    def _start_run(self) -> None:
        self._simulation = IntersectionSimulation(self.config)
        self.metrics_collector = MetricsCollector(window=self.config.metrics_window)
        self.metrics_history = []

    @property
    def simulation(self) -> IntersectionSimulation:
        return self._simulation

    def reset(self) -> Dict[str, int]:
        with self._lock:
            self._start_run()
        logger.info("Simulation reset")
        return {"step": 0}

    def add_vehicle(self, vehicle_id: str, start_road: Approach, end_road: Approach) -> Dict[str, Any]:
        with self._lock:
            vehicle = self._simulation.add_vehicle(vehicle_id, start_road, end_road)
        return {
            "vehicleId": vehicle.vehicle_id,
            "lane": "left" if vehicle.uses_left_lane else "right",
            "turn": vehicle.turn_value.name.lower(),
        }

    def step(self) -> Dict[str, List[str]]:
        with self._lock:
            left = self._simulation.step()
            self._update_metrics()
        return {"leftVehicles": left}

    def simulate(self, raw_commands: List[Any]) -> Dict:
        """Run a batch of commands on a fresh, throwaway simulation."""

        result = run_commands(parse_commands(raw_commands), config=self.config)
        return result.to_dict()

    def _current_phase(self) -> str | None:
        phase = self._simulation.scheduler.current_phase
        return phase.value if phase is not None else None

    def _update_metrics(self) -> None:
        for vehicle in self._simulation.last_departed:
            self.metrics_collector.on_departure(vehicle.waiting_for)

        self.metrics_collector.record_queues(self._simulation.intersection.queue_lengths())
        self.metrics_collector.finalize_step()

        snapshot = self.metrics_collector.snapshot(
            step=self._simulation.step_count,
            current_phase=self._current_phase(),
        )
        self.metrics_history.append(snapshot)
        self.metrics_history = self.metrics_history[-200:]

    def snapshot(self) -> Dict:
        with self._lock:
            scheduler = self._simulation.scheduler
            action = self._simulation.last_action
            return {
                "step": self._simulation.step_count,
                "phase": self._current_phase(),
                "mode": scheduler.mode(self._simulation.intersection).value,
                "cycleElapsed": scheduler.cycle_elapsed,
                "lastAction": action.value if action is not None else None,
                "roads": self._simulation.intersection.describe(),
            }

    def metrics(self) -> Dict:
        with self._lock:
            latest = (
                self.metrics_history[-1]
                if self.metrics_history
                else self.metrics_collector.snapshot(step=0, current_phase=self._current_phase())
            )
            return {
                "latest": latest.__dict__,
                "history": [snapshot.__dict__ for snapshot in self.metrics_history[-60:]],
            }


class VehicleCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vehicle_id: str = Field(alias="vehicleId")
    start_road: Approach = Field(alias="startRoad")
    end_road: Approach = Field(alias="endRoad")


class CommandBatch(BaseModel):
    commands: List[Any]


def create_app(runtime: SimulationRuntime | None = None) -> FastAPI:
    runtime = runtime or SimulationRuntime()
    app = FastAPI(title="junctionflow")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/state")
    async def get_state() -> Dict:
        return runtime.snapshot()

    @app.get("/api/metrics")
    async def get_metrics() -> Dict:
        return runtime.metrics()

    @app.post("/api/vehicles")
    async def add_vehicle(vehicle: VehicleCreate) -> Dict:
        return runtime.add_vehicle(vehicle.vehicle_id, vehicle.start_road, vehicle.end_road)

    @app.post("/api/step")
    async def step() -> Dict[str, List[str]]:
        return runtime.step()

    @app.post("/api/simulate")
    async def simulate(batch: CommandBatch) -> Dict:
        if not batch.commands:
            raise HTTPException(status_code=400, detail="No commands supplied")
        return runtime.simulate(batch.commands)

    @app.post("/api/reset")
    async def reset() -> Dict[str, int]:
        return runtime.reset()

    return app


app = create_app()
