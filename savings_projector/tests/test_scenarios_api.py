from __future__ import annotations

from savings_projector.app import create_app
from savings_projector.core.projection import ScenarioInput
from savings_projector.database import SqliteScenarioStore


def scenario_payload(**overrides) -> dict:
    payload = {
        "principal": 100000,
        "monthly": 10000,
        "rate": 3,
        "years": 1,
        "increaseConfig": None,
    }
    payload.update(overrides)
    return payload


def test_projection_endpoint_does_not_save(client):
    resp = client.post("/api/projection", json=scenario_payload())

    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["data"]) == 12
    assert body["summary"] == {
        "finalAmount": 224705,
        "principal": 100000.0,
        "totalContribution": 120000,
        "totalInterest": 4705.0,
    }
    assert body["description"] == "No increase"
    assert client.get("/api/ping").get_json()["scenarios"] == 0


def test_add_scenario_returns_created_and_state(client):
    resp = client.post(
        "/api/scenarios",
        json=scenario_payload(years=2, increaseConfig={"type": "fixed", "amount": 5000}),
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["created"]["ordinal"] == 0
    assert body["created"]["label"] == "Pattern 1"
    assert body["created"]["description"] == "+5,000/month every year"
    assert body["created"]["input"]["increaseConfig"]["type"] == "fixed"
    assert body["headline"] == body["created"]["summary"]
    assert body["chart"]["maxMonths"] == 24
    assert len(body["chart"]["labels"]) == 24


def test_remove_scenario_promotes_next_headline(client):
    client.post("/api/scenarios", json=scenario_payload(principal=1000))
    client.post("/api/scenarios", json=scenario_payload(principal=2000, years=3))

    resp = client.delete("/api/scenarios/0")

    assert resp.status_code == 200
    body = resp.get_json()
    assert [s["label"] for s in body["scenarios"]] == ["Pattern 1"]
    assert body["headline"]["principal"] == 2000.0
    assert body["chart"]["datasets"][0]["borderColor"] == "#3b82f6"

    resp = client.delete("/api/scenarios/0")
    assert resp.get_json()["headline"] is None
    assert resp.get_json()["chart"] == {"labels": [], "maxMonths": 0, "datasets": []}


def test_remove_unknown_ordinal_returns_404(client):
    client.post("/api/scenarios", json=scenario_payload())

    resp = client.delete("/api/scenarios/5")

    assert resp.status_code == 404
    assert "ordinal 5" in resp.get_json()["detail"]
    assert len(client.get("/api/scenarios").get_json()["scenarios"]) == 1


def test_invalid_payload_returns_400(client):
    for bad in (
        scenario_payload(principal=0),
        scenario_payload(monthly=-5),
        scenario_payload(years=0),
        scenario_payload(years=1.5),
        scenario_payload(increaseConfig={"type": "percent"}),
        {"principal": 1},
    ):
        resp = client.post("/api/scenarios", json=bad)
        assert resp.status_code == 400
        assert "detail" in resp.get_json()

    for raw in (
        '{"principal": 1, "monthly": 1, "rate": NaN, "years": 1}',
        '{"principal": Infinity, "monthly": 1, "rate": 3, "years": 1}',
        '{"principal": 1, "monthly": 1, "rate": 3, "years": 1, "increaseConfig": {"type": "fixed", "amount": -Infinity}}',
    ):
        for path in ("/api/projection", "/api/scenarios"):
            resp = client.post(path, data=raw, content_type="application/json")
            assert resp.status_code == 400
            assert "detail" in resp.get_json()

    assert client.get("/api/ping").get_json()["scenarios"] == 0


def test_zero_rate_is_accepted(client):
    resp = client.post("/api/projection", json=scenario_payload(rate=0))

    assert resp.status_code == 200
    assert resp.get_json()["summary"]["totalInterest"] == 0


def test_scenarios_survive_app_restart(settings, client):
    client.post("/api/scenarios", json=scenario_payload(principal=1000))
    client.post(
        "/api/scenarios",
        json=scenario_payload(principal=2000, increaseConfig={"type": "percent", "percent": 3}),
    )

    reloaded = create_app(settings)
    with reloaded.test_client() as other:
        body = other.get("/api/scenarios").get_json()

    assert [s["input"]["principal"] for s in body["scenarios"]] == [1000.0, 2000.0]
    assert body["scenarios"][1]["description"] == "+3% every year"


def test_chart_endpoint_cycles_palette(client):
    for principal in range(1, 7):
        client.post("/api/scenarios", json=scenario_payload(principal=principal))

    body = client.get("/api/chart").get_json()

    colors = [dataset["borderColor"] for dataset in body["datasets"]]
    assert colors[5] == colors[0]
    assert body["labels"][:4] == ["Y0", "", "", "Y0 M4"]


def test_stored_scenario_outside_form_bounds_still_lists(settings):
    """Saved inputs are echoed back as-is; submission bounds apply only to new forms."""
    SqliteScenarioStore(settings.database).save(
        [ScenarioInput(principal=1000, monthly_contribution=100, annual_rate_percent=1, horizon_years=150)]
    )

    with create_app(settings).test_client() as client:
        resp = client.get("/api/scenarios")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["scenarios"][0]["input"]["years"] == 150
    assert body["chart"]["maxMonths"] == 1800
