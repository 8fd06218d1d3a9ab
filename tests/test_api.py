"""
Test the HTTP transport.
"""

import pytest
from fastapi.testclient import TestClient

from retirement_outlook.main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestEndpoints:
    """Test request/response round trips."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "docs" in response.json()

    def test_default_parameters(self, client):
        body = client.get("/api/default_parameters").json()

        assert body["current_age"] == 54
        assert body["legal_retirement_age"] == 67
        assert body["capital_gains_tax"] == 26.25

    def test_simulate(self, client, default_profile):
        payload = dict(default_profile, simulation_runs=100, seed=3)
        response = client.post("/api/simulate", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["ages"][0] == 54 and body["ages"][-1] == 90
        assert len(body["asset_percentiles"]["p50"]) == len(body["ages"])
        assert 0 <= body["success_rate"] <= 100

    def test_simulate_rejects_bad_horizon(self, client, default_profile):
        response = client.post("/api/simulate", json=dict(default_profile, end_age=40))

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "end_age"

    def test_simulate_rejects_malformed_body(self, client):
        response = client.post("/api/simulate", json={"current_age": "old"})

        assert response.status_code == 422

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"end_age": 40}, "end_age"),
            ({"annual_expenses": {"repairs": -1}}, "annual_expenses.repairs"),
        ],
    )
    def test_report_rejects_invalid_input(self, client, default_profile, overrides, field):
        response = client.post("/api/report", json=dict(default_profile, **overrides))

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == field

    def test_report(self, client, default_profile):
        payload = dict(default_profile, simulation_runs=150, seed=4, capital_gains_tax=2625)
        response = client.post("/api/report", params={"locale": "de"}, json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["metrics"]["bridge"]["years"] == 7
        assert body["report"]["assumptions"]["cap_gains_tax_rate_pct"] == pytest.approx(26.25)
        assert body["report"]["locale"] == "de"
        assert body["metrics"]["success_count"] == round(
            body["metrics"]["success_rate"] / 100 * body["metrics"]["trials"]
        )

    def test_report_out_of_schema_range(self, client, default_profile):
        payload = dict(default_profile, simulation_runs=10, seed=4, roi_volatility=0.8)
        response = client.post("/api/report", json=payload)

        assert response.status_code == 422
