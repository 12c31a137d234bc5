"""
End-to-end tests for the HTTP API.

These tests drive the Flask application through its test client against a
temporary database and snapshot directory.
"""

import pytest

MORTGAGE = {
    "name": "Home",
    "original_principal": 300000,
    "interest_rate_percent": 6,
    "term_years": 30,
    "start_date": "2024-01-01",
}

ACCOUNT = {
    "name": "Work 401k",
    "account_type": "401k",
    "provider": "Fidelity",
    "current_balance": 10000,
    "contribution_amount": 500,
    "contribution_frequency": "monthly",
    "employer_match_percentage": 50,
    "expected_return_percent": 7,
}


def create_account(client, **overrides):
    response = client.post("/api/retirement/accounts", json={**ACCOUNT, **overrides})
    assert response.status_code == 201
    return response.get_json()


class TestMortgageApi:
    """Test cases for the mortgage endpoints."""

    def test_no_mortgage(self, client):
        """Test reads without a mortgage."""
        assert client.get("/api/mortgage").status_code == 404
        assert client.get("/api/mortgage/schedule").status_code == 404
        assert client.get("/api/mortgage/summary").status_code == 404
        assert client.get("/api/mortgage/extra-payment-impact").status_code == 404
        assert client.delete("/api/mortgage").status_code == 404

    def test_create_and_read(self, client):
        """Test creating a mortgage from percentage input."""
        response = client.put("/api/mortgage", json=MORTGAGE)

        assert response.status_code == 201
        data = client.get("/api/mortgage").get_json()
        assert data["interest_rate"] == pytest.approx(0.06)
        assert data["term_months"] == 360
        assert data["monthly_payment"] == pytest.approx(1798.65, abs=0.01)

    def test_invalid_input(self, client):
        """Test that validation errors are reported."""
        response = client.put("/api/mortgage", json={**MORTGAGE, "interest_rate_percent": 650})

        assert response.status_code == 400
        data = response.get_json()
        assert data["error"] == "Invalid input"
        assert data["details"][0]["loc"] == ["interest_rate_percent"]

    def test_non_object_body(self, client):
        """Test that the body must be a JSON object."""
        response = client.put("/api/mortgage", json=[1, 2, 3])

        assert response.status_code == 400

    def test_update(self, client):
        """Test a partial update."""
        client.put("/api/mortgage", json=MORTGAGE)

        response = client.patch("/api/mortgage", json={"term_years": 15})

        assert response.status_code == 200
        assert response.get_json()["term_months"] == 180

    def test_update_without_mortgage(self, client):
        """Test updating when there is no mortgage."""
        response = client.patch("/api/mortgage", json={"escrow_amount": 100})

        assert response.status_code == 404

    def test_schedule(self, client):
        """Test the amortization schedule."""
        client.put("/api/mortgage", json=MORTGAGE)

        data = client.get("/api/mortgage/schedule").get_json()

        assert len(data["entries"]) == 360
        assert data["non_convergent"] is False
        assert data["entries"][0]["date"] == "2024-02-01"

    def test_schedule_with_extra_payment(self, client):
        """Test the schedule with an extra payment."""
        client.put("/api/mortgage", json=MORTGAGE)

        data = client.get("/api/mortgage/schedule?extra_payment=200").get_json()

        assert len(data["entries"]) < 360

    @pytest.mark.parametrize("value", ["abc", "-5", "inf"])
    def test_schedule_rejects_bad_extra_payment(self, client, value):
        """Test invalid extra payment amounts."""
        client.put("/api/mortgage", json=MORTGAGE)

        response = client.get(f"/api/mortgage/schedule?extra_payment={value}")

        assert response.status_code == 400

    def test_summary(self, client):
        """Test the mortgage summary."""
        client.put("/api/mortgage", json={**MORTGAGE, "current_balance": 240000})

        data = client.get("/api/mortgage/summary").get_json()

        assert data["equity_amount"] == 60000
        assert data["remaining_payments"] == 360

    def test_extra_payment_impact(self, client):
        """Test the extra-payment comparison."""
        client.put("/api/mortgage", json=MORTGAGE)

        default = client.get("/api/mortgage/extra-payment-impact").get_json()
        larger = client.get("/api/mortgage/extra-payment-impact?extra_monthly=500").get_json()

        assert default["extra_amount"] == 100
        assert larger["months_saved"] > default["months_saved"] > 0

    def test_delete(self, client):
        """Test mortgage deletion."""
        client.put("/api/mortgage", json=MORTGAGE)

        assert client.delete("/api/mortgage").status_code == 204
        assert client.get("/api/mortgage").status_code == 404


class TestRetirementApi:
    """Test cases for the retirement endpoints."""

    def test_account_crud(self, client):
        """Test creating, updating and deleting an account."""
        account = create_account(client)
        assert account["expected_return_rate"] == pytest.approx(0.07)

        response = client.patch(
            f"/api/retirement/accounts/{account['id']}", json={"name": "Renamed"}
        )
        assert response.get_json()["name"] == "Renamed"
        assert len(client.get("/api/retirement/accounts").get_json()) == 1

        assert client.delete(f"/api/retirement/accounts/{account['id']}").status_code == 204
        assert client.get(f"/api/retirement/accounts/{account['id']}").status_code == 404

    def test_unknown_account(self, client):
        """Test requests for an unknown account."""
        assert client.get("/api/retirement/accounts/missing").status_code == 404
        assert client.delete("/api/retirement/accounts/missing").status_code == 404
        assert (
            client.get("/api/retirement/accounts/missing/contributions").status_code == 404
        )
        assert (
            client.get("/api/retirement/accounts/missing/projections").status_code == 404
        )

    def test_contributions(self, client):
        """Test recording and listing contributions."""
        account = create_account(client)

        response = client.post(
            "/api/retirement/contributions",
            json={
                "account_id": account["id"],
                "date": "2024-02-15",
                "employee_amount": 500,
                "employer_amount": 250,
                "balance_after": 10750,
            },
        )

        assert response.status_code == 201
        contribution = response.get_json()
        assert contribution["total_amount"] == 750
        listed = client.get(
            f"/api/retirement/accounts/{account['id']}/contributions"
        ).get_json()
        assert [c["id"] for c in listed] == [contribution["id"]]
        balance = client.get(f"/api/retirement/accounts/{account['id']}").get_json()
        assert balance["current_balance"] == 10750

        response = client.patch(
            f"/api/retirement/contributions/{contribution['id']}", json={"notes": "Q1"}
        )
        assert response.get_json()["notes"] == "Q1"
        response = client.delete(f"/api/retirement/contributions/{contribution['id']}")
        assert response.status_code == 204

    def test_account_projections(self, client):
        """Test projecting a single account."""
        account = create_account(client)

        data = client.get(
            f"/api/retirement/accounts/{account['id']}/projections?years=1"
        ).get_json()

        assert len(data) == 2
        assert data[1]["ending_balance"] == pytest.approx(10000 + 6000 + 3000 + 19000 * 0.07)

    def test_projection_horizon_from_ages(self, client):
        """Test that the horizon runs to retirement when no years are given."""
        create_account(client)

        data = client.get(
            "/api/retirement/projections?current_age=60&retirement_age=62"
        ).get_json()

        assert [row["age"] for row in data] == [60, 61, 62]

    def test_projection_default_horizon(self, client):
        """Test the configured default horizon."""
        create_account(client)

        data = client.get("/api/retirement/projections").get_json()

        assert len(data) == 31

    def test_summary(self, client):
        """Test the retirement summary."""
        create_account(client)

        data = client.get("/api/retirement/summary?current_age=64").get_json()

        assert data["account_count"] == 1
        assert data["years_to_retirement"] == 1
        assert data["monthly_income_at_retirement"] == pytest.approx(
            data["projected_balance_at_retirement"] * 0.04 * 0.78 / 12
        )

    def test_summary_without_age(self, client):
        """Test that the summary has no projection without an age."""
        create_account(client)

        data = client.get("/api/retirement/summary").get_json()

        assert data["total_balance"] == 10000
        assert data["projected_balance_at_retirement"] is None

    @pytest.mark.parametrize(
        "query",
        ["years=101", "years=2000", "current_age=121", "current_age=40&retirement_age=500"],
    )
    def test_projection_horizon_bounded(self, client, query):
        """Test that oversized horizons and ages are rejected."""
        create_account(client, expected_return_percent=100)

        response = client.get(f"/api/retirement/projections?{query}")

        assert response.status_code == 400
        assert "at most" in response.get_json()["error"]

    def test_maximum_horizon_is_valid_json(self, client):
        """Test that the largest horizon still has finite balances."""
        create_account(client, expected_return_percent=100)

        response = client.get("/api/retirement/projections?years=100")

        assert response.status_code == 200
        assert b"Infinity" not in response.data
        assert len(response.get_json()) == 101

    def test_summary_age_bounded(self, client):
        """Test that the summary rejects impossible ages."""
        response = client.get("/api/retirement/summary?current_age=64&retirement_age=1000")

        assert response.status_code == 400

    def test_invalid_age(self, client):
        """Test a non-numeric age."""
        response = client.get("/api/retirement/summary?current_age=old")

        assert response.status_code == 400


class TestSnapshotApi:
    """Test cases for the snapshot endpoints."""

    def test_export_and_restore(self, client):
        """Test exporting and restoring all records."""
        client.put("/api/mortgage", json=MORTGAGE)
        account = create_account(client)

        response = client.post("/api/snapshots/backup")
        assert response.status_code == 201
        assert response.get_json() == {
            "name": "backup",
            "has_mortgage": True,
            "accounts": 1,
            "contributions": 0,
        }
        assert client.get("/api/snapshots").get_json() == {"snapshots": ["backup"]}

        client.delete(f"/api/retirement/accounts/{account['id']}")
        client.delete("/api/mortgage")

        response = client.post("/api/snapshots/backup/restore")
        assert response.status_code == 200
        assert client.get(f"/api/retirement/accounts/{account['id']}").status_code == 200
        assert client.get("/api/mortgage").status_code == 200

    def test_restore_missing(self, client):
        """Test restoring an unknown snapshot."""
        assert client.post("/api/snapshots/missing/restore").status_code == 404

    def test_delete(self, client):
        """Test deleting a snapshot."""
        client.post("/api/snapshots/backup")

        assert client.delete("/api/snapshots/backup").status_code == 204
        assert client.delete("/api/snapshots/backup").status_code == 404
