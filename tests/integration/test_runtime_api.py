import pytest
from fastapi.testclient import TestClient

from src.server.runtime import SimulationRuntime, create_app
from src.simulation.core import SimulationConfig


pytestmark = pytest.mark.integration


@pytest.fixture
def client():
    runtime = SimulationRuntime(SimulationConfig(metrics_window=10))
    return TestClient(create_app(runtime))


def test_vehicles_step_and_state(client):
    response = client.post(
        "/api/vehicles", json={"vehicleId": "v1", "startRoad": "east", "endRoad": "north"}
    )
    assert response.status_code == 200
    assert response.json() == {"vehicleId": "v1", "lane": "right", "turn": "right"}

    response = client.post("/api/step")
    assert response.json() == {"leftVehicles": ["v1"]}

    state = client.get("/api/state").json()
    assert state["step"] == 1
    assert state["phase"] == "eastWestStraightRight"
    assert state["mode"] == "steady_green"
    east = next(road for road in state["roads"] if road["road"] == "east")
    assert east["mainLight"] == "green"
    assert east["rightLane"] == []

    metrics = client.get("/api/metrics").json()
    assert metrics["latest"]["completed_departures"] == 1
    assert metrics["latest"]["max_wait"] == 1
    assert len(metrics["history"]) == 1


def test_rejects_unknown_approach(client):
    response = client.post(
        "/api/vehicles", json={"vehicleId": "v1", "startRoad": "up", "endRoad": "north"}
    )
    assert response.status_code == 422


def test_simulate_runs_batch_on_fresh_run(client):
    client.post("/api/vehicles", json={"vehicleId": "live", "startRoad": "west", "endRoad": "east"})

    response = client.post(
        "/api/simulate",
        json={
            "commands": [
                {"type": "addVehicle", "vehicleId": "b1", "startRoad": "south", "endRoad": "south"},
                {"type": "nope"},
                {"type": "step"},
            ]
        },
    )

    assert response.json() == {"stepStatuses": [{"leftVehicles": ["b1"]}]}
    west = next(road for road in client.get("/api/state").json()["roads"] if road["road"] == "west")
    assert west["rightLane"] == ["live"]

    assert client.post("/api/simulate", json={"commands": []}).status_code == 400


def test_reset_discards_run(client):
    client.post("/api/vehicles", json={"vehicleId": "v1", "startRoad": "north", "endRoad": "south"})
    client.post("/api/step")

    assert client.post("/api/reset").json() == {"step": 0}

    state = client.get("/api/state").json()
    assert state["step"] == 0
    assert state["phase"] is None
    assert state["mode"] == "uninitialized"
