import json

import pytest

from src.cli import main


@pytest.mark.integration
def test_cli_runs_command_file(tmp_path):
    input_path = tmp_path / "input.json"
    input_path.write_text(
        json.dumps(
            {
                "commands": [
                    {"type": "addVehicle", "vehicleId": "v1", "startRoad": "north", "endRoad": "south"},
                    {"type": "addVehicle", "vehicleId": "v2", "startRoad": "north", "endRoad": "east"},
                    {"type": "bogus"},
                    {"type": "step"},
                    {"type": "step"},
                    {"type": "step"},
                ]
            }
        )
    )
    config_path = tmp_path / "config.yaml"
    config_path.write_text("min_green_steps: 5\nlog_level: warning\n")
    output_path = tmp_path / "output.json"

    exit_code = main([str(input_path), str(output_path), "--config", str(config_path)])

    assert exit_code == 0
    assert json.loads(output_path.read_text()) == {
        "stepStatuses": [
            {"leftVehicles": ["v1"]},
            {"leftVehicles": []},
            {"leftVehicles": ["v2"]},
        ]
    }


@pytest.mark.integration
def test_cli_reports_missing_and_malformed_input(tmp_path):
    output_path = tmp_path / "output.json"

    assert main([str(tmp_path / "missing.json"), str(output_path)]) == 1

    bad_input = tmp_path / "bad.json"
    bad_input.write_text("{not json")
    assert main([str(bad_input), str(output_path)]) == 1
    assert not output_path.exists()


@pytest.mark.integration
def test_cli_rejects_unknown_log_levels(tmp_path):
    input_path = tmp_path / "input.json"
    input_path.write_text(json.dumps({"commands": [{"type": "step"}]}))
    config_path = tmp_path / "config.yaml"
    config_path.write_text("log_level: loud\n")
    output_path = tmp_path / "output.json"

    assert main([str(input_path), str(output_path), "--config", str(config_path)]) == 1
    assert main([str(input_path), str(output_path), "--log-level", "chatty"]) == 1
    assert not output_path.exists()

    assert main([str(input_path), str(output_path), "--log-level", "debug"]) == 0
    assert output_path.exists()


@pytest.mark.integration
def test_cli_rejects_directory_as_input(tmp_path):
    output_path = tmp_path / "output.json"

    assert main([str(tmp_path), str(output_path)]) == 1
    assert not output_path.exists()
