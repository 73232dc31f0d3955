"""Command stream consumer and result sink for batch simulation runs.

A batch is a JSON document ``{"commands": [...]}`` where each command is
either ``{"type": "addVehicle", "vehicleId", "startRoad", "endRoad"}`` or
``{"type": "step"}``. Commands that fail validation are skipped. The result
document lists one ``{"leftVehicles": [...]}`` entry per step command.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Iterable, List, Literal, Optional, Union
import json
import logging

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from src.map.approaches import Approach
from src.simulation.core import IntersectionSimulation, SimulationConfig

logger = logging.getLogger(__name__)


class AddVehicleCommand(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["addVehicle"] = "addVehicle"
    vehicle_id: str = Field(alias="vehicleId")
    start_road: Approach = Field(alias="startRoad")
    end_road: Approach = Field(alias="endRoad")


class StepCommand(BaseModel):
    type: Literal["step"] = "step"


Command = Annotated[Union[AddVehicleCommand, StepCommand], Field(discriminator="type")]

_command_adapter: TypeAdapter = TypeAdapter(Command)


@dataclass
class StepStatus:
    left_vehicles: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"leftVehicles": list(self.left_vehicles)}


@dataclass
class SimulationResult:
    step_statuses: List[StepStatus] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"stepStatuses": [status.to_dict() for status in self.step_statuses]}


def parse_commands(raw_commands: Iterable[Any]) -> List[Union[AddVehicleCommand, StepCommand]]:
    """Validate raw command mappings, dropping any that are malformed."""

    commands = []
    for index, raw in enumerate(raw_commands):
        try:
            commands.append(_command_adapter.validate_python(raw))
        except ValidationError as exc:
            logger.warning("Skipping invalid command #%d: %s", index, exc.errors())
    return commands


def load_commands(path: str | Path) -> List[Union[AddVehicleCommand, StepCommand]]:
    """Read and validate the command list stored in a JSON file."""

    path = Path(path)
    try:
        document = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("commands"), list):
        raise ValueError("Input file must contain a 'commands' list at the top level.")

    return parse_commands(document["commands"])


def run_commands(
    commands: Iterable[Union[AddVehicleCommand, StepCommand]],
    *,
    config: Optional[SimulationConfig] = None,
    simulation: Optional[IntersectionSimulation] = None,
) -> SimulationResult:
    """Apply commands in order and collect the departures of every step."""

    simulation = simulation or IntersectionSimulation(config)
    result = SimulationResult()
    for command in commands:
        if isinstance(command, AddVehicleCommand):
            simulation.add_vehicle(command.vehicle_id, command.start_road, command.end_road)
        else:
            result.step_statuses.append(StepStatus(simulation.step()))
    logger.info(
        "Ran %d steps, %d vehicles still queued",
        len(result.step_statuses),
        simulation.intersection.vehicle_count,
    )
    return result


def write_results(path: str | Path, result: SimulationResult) -> None:
    Path(path).write_text(json.dumps(result.to_dict(), indent=2))
