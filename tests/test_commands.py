import json

import pytest

from src.map.approaches import Approach
from src.simulation.commands import (
    AddVehicleCommand,
    StepCommand,
    load_commands,
    parse_commands,
    run_commands,
    write_results,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def raw_commands():
    return [
        {"type": "addVehicle", "vehicleId": "vehicle1", "startRoad": "south", "endRoad": "north"},
        {"type": "addVehicle", "vehicleId": "vehicle2", "startRoad": "north", "endRoad": "south"},
        {"type": "step"},
        {"type": "step"},
        {"type": "addVehicle", "vehicleId": "vehicle3", "startRoad": "west", "endRoad": "south"},
        {"type": "addVehicle", "vehicleId": "vehicle4", "startRoad": "west", "endRoad": "south"},
        {"type": "step"},
        {"type": "step"},
        {"type": "step"},
        {"type": "step"},
    ]


def test_parse_commands_skips_malformed_entries():
    commands = parse_commands(
        [
            {"type": "addVehicle", "vehicleId": "ok", "startRoad": "east", "endRoad": "west"},
            {"type": "addVehicle", "vehicleId": "bad", "startRoad": "up", "endRoad": "west"},
            {"type": "addVehicle", "startRoad": "east", "endRoad": "west"},
            {"type": "teleport"},
            "step",
            {"type": "step"},
        ]
    )

    assert len(commands) == 2
    assert isinstance(commands[0], AddVehicleCommand)
    assert commands[0].vehicle_id == "ok"
    assert commands[0].start_road is Approach.EAST
    assert isinstance(commands[1], StepCommand)


def test_run_commands_reports_each_step(raw_commands):
    result = run_commands(parse_commands(raw_commands))

    assert [status.left_vehicles for status in result.step_statuses] == [
        ["vehicle2", "vehicle1"],
        [],
        [],
        [],
        ["vehicle3"],
        ["vehicle4"],
    ]


def test_load_and_write_round_trip_documents(tmp_path, raw_commands):
    input_path = tmp_path / "input.json"
    input_path.write_text(json.dumps({"commands": raw_commands}))
    output_path = tmp_path / "output.json"

    write_results(output_path, run_commands(load_commands(input_path)))

    document = json.loads(output_path.read_text())
    assert list(document) == ["stepStatuses"]
    assert document["stepStatuses"][0] == {"leftVehicles": ["vehicle2", "vehicle1"]}
    assert len(document["stepStatuses"]) == 6


@pytest.mark.parametrize("content", ["not json", "[]", '{"commands": {}}'])
def test_load_commands_rejects_bad_files(tmp_path, content):
    path = tmp_path / "input.json"
    path.write_text(content)

    with pytest.raises(ValueError):
        load_commands(path)
