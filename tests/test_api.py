"""HTTP tests for the marketplace API over the demo data set."""

import pytest


def _as(profile_id):
    return {"profile_id": str(profile_id)}


class TestAuthentication:
    def test_missing_header_is_unauthenticated(self, api_client):
        r = api_client.get("/contracts/1")
        assert r.status_code == 401
        assert r.json() == {"message": "Unauthorized"}

    @pytest.mark.parametrize("value", ["abc", "999", ""])
    def test_unknown_or_malformed_profile_is_unauthenticated(self, api_client, value):
        r = api_client.get("/jobs/unpaid", headers={"profile_id": value})
        assert r.status_code == 401


class TestContracts:
    def test_party_can_read_contract(self, api_client):
        r = api_client.get("/contracts/1", headers=_as(1))
        assert r.status_code == 200
        body = r.json()
        assert body["id"] == 1
        assert body["client_id"] == 1
        assert body["contractor_id"] == 5
        assert body["status"] == "terminated"

    def test_contractor_can_read_contract(self, api_client):
        assert api_client.get("/contracts/1", headers=_as(5)).status_code == 200

    def test_non_party_gets_not_found(self, api_client):
        r = api_client.get("/contracts/1", headers=_as(2))
        assert r.status_code == 404
        assert r.json() == {"message": "No Records Found!"}

    def test_list_excludes_terminated(self, api_client):
        r = api_client.get("/contracts", headers=_as(1))
        assert r.status_code == 200
        assert [c["id"] for c in r.json()] == [2]

    def test_list_with_only_terminated_is_not_found(self, api_client):
        assert api_client.get("/contracts", headers=_as(5)).status_code == 404

    def test_list_includes_new_contracts(self, api_client):
        r = api_client.get("/contracts", headers=_as(8))
        assert [c["id"] for c in r.json()] == [5, 9]


class TestJobs:
    def test_unpaid_for_client(self, api_client):
        r = api_client.get("/jobs/unpaid", headers=_as(1))
        assert r.status_code == 200
        assert [j["id"] for j in r.json()] == [2]

    def test_unpaid_for_contractor(self, api_client):
        r = api_client.get("/jobs/unpaid", headers=_as(7))
        assert [j["id"] for j in r.json()] == [4, 5]
        assert all(j["paid"] in (None, False) for j in r.json())

    def test_pay_moves_money(self, api_client):
        r = api_client.post("/jobs/2/pay", headers=_as(1))
        assert r.status_code == 200
        body = r.json()
        assert body["message"] == "Job Paid Successfully!"
        assert body["job_id"] == 2
        assert body["amount"] == 201
        assert body["balance"] == 949

        profiles = {p["id"]: p for p in api_client.get("/profiles").json()}
        assert profiles[1]["balance"] == 949
        assert profiles[6]["balance"] == 1415
        assert api_client.get("/jobs/unpaid", headers=_as(1)).status_code == 404

    def test_pay_twice_is_not_found(self, api_client):
        assert api_client.post("/jobs/2/pay", headers=_as(1)).status_code == 200
        assert api_client.post("/jobs/2/pay", headers=_as(1)).status_code == 404

    def test_pay_ignores_request_body(self, api_client):
        r = api_client.post("/jobs/2/pay", headers=_as(1), json={"amount": 1})
        assert r.json()["amount"] == 201

    def test_pay_with_insufficient_balance(self, api_client):
        r = api_client.post("/jobs/5/pay", headers=_as(4))
        assert r.status_code == 402
        body = r.json()
        assert body["message"] == "Insufficient Balance!"
        assert body["balance"] == 1.3
        assert body["price"] == 200

    def test_contractor_cannot_pay(self, api_client):
        assert api_client.post("/jobs/2/pay", headers=_as(6)).status_code == 404

    def test_paid_job_cannot_be_paid(self, api_client):
        assert api_client.post("/jobs/6/pay", headers=_as(4)).status_code == 404

    def test_job_on_terminated_contract_cannot_be_paid(self, api_client):
        assert api_client.post("/jobs/1/pay", headers=_as(1)).status_code == 404


class TestDeposits:
    def test_deposit_within_cap(self, api_client):
        r = api_client.post("/balances/deposit/2", headers=_as(2), json={"amount": 100})
        assert r.status_code == 200
        body = r.json()
        assert body["message"] == "Amount Deposited Successfully!"
        assert body["profile_id"] == 2
        assert body["balance"] == pytest.approx(331.11)

    def test_deposit_over_cap(self, api_client):
        r = api_client.post("/balances/deposit/2", headers=_as(2), json={"amount": 101})
        assert r.status_code == 400
        assert r.json() == {"max_deposit": 100.5, "message": "Maximum Deposit Amount Exceeded."}

    def test_deposit_for_another_profile(self, api_client):
        r = api_client.post("/balances/deposit/2", headers=_as(1), json={"amount": 10})
        assert r.status_code == 200

    def test_deposit_without_unpaid_jobs(self, api_client):
        r = api_client.post("/balances/deposit/5", headers=_as(5), json={"amount": 10})
        assert r.status_code == 404

    @pytest.mark.parametrize("payload", [{"amount": 0}, {"amount": -10}, {"amount": "ten"}, {}])
    def test_deposit_body_validation(self, api_client, payload):
        r = api_client.post("/balances/deposit/2", headers=_as(2), json=payload)
        assert r.status_code == 422
        body = r.json()
        assert body["message"].startswith("Invalid request")
        assert body["details"]

    def test_deposit_huge_amount_hits_cap(self, api_client):
        r = api_client.post("/balances/deposit/2", headers=_as(2), json={"amount": 1e30})
        assert r.status_code == 400
        assert r.json() == {"max_deposit": 100.5, "message": "Maximum Deposit Amount Exceeded."}

    def test_deposit_requires_caller(self, api_client):
        r = api_client.post("/balances/deposit/2", json={"amount": 10})
        assert r.status_code == 401


class TestAdmin:
    def test_best_profession(self, api_client):
        r = api_client.get("/admin/best-profession", params={"start": "2020-08-01", "end": "2020-08-31"})
        assert r.status_code == 200
        assert r.json() == [{"profession": "Programmer", "earned": 2683.0}]

    def test_best_profession_empty(self, api_client):
        r = api_client.get("/admin/best-profession", params={"start": "2019-01-01", "end": "2019-01-31"})
        assert r.status_code == 200
        assert r.json() == []

    def test_best_clients(self, api_client):
        r = api_client.get("/admin/best-clients", params={"start": "2020-08-01", "end": "2020-08-31"})
        assert r.status_code == 200
        assert r.json() == [
            {"id": 4, "fullName": "Ash Kethcum", "paid": 2020.0},
            {"id": 1, "fullName": "Harry Potter", "paid": 442.0},
        ]

    def test_best_clients_with_limit(self, api_client):
        r = api_client.get("/admin/best-clients", params={"start": "2020-08-01", "end": "2020-08-31", "limit": 3})
        assert [c["id"] for c in r.json()] == [4, 1, 2]

    def test_best_clients_rejects_zero_limit(self, api_client):
        r = api_client.get("/admin/best-clients", params={"start": "2020-08-01", "end": "2020-08-31", "limit": 0})
        assert r.status_code == 422
        assert "limit" in r.json()["message"]

    def test_non_integer_path_id_has_message(self, api_client):
        r = api_client.get("/contracts/abc", headers=_as(1))
        assert r.status_code == 422
        assert "contract_id" in r.json()["message"]

    @pytest.mark.parametrize("params", [{}, {"start": "2020-08-01"}, {"start": "nope", "end": "2020-08-31"}])
    def test_bad_date_range(self, api_client, params):
        r = api_client.get("/admin/best-profession", params=params)
        assert r.status_code == 400
        assert "message" in r.json()

    def test_api_key_required_when_configured(self, api_client, monkeypatch):
        monkeypatch.setenv("ADMIN_API_KEYS", "k1, k2")
        params = {"start": "2020-08-01", "end": "2020-08-31"}

        assert api_client.get("/admin/best-clients", params=params).status_code == 401
        assert api_client.get("/admin/best-clients", params=params, headers={"X-API-KEY": "nope"}).status_code == 401
        assert api_client.get("/admin/best-clients", params=params, headers={"X-API-KEY": "k2"}).status_code == 200


class TestListings:
    def test_profiles(self, api_client):
        r = api_client.get("/profiles")
        assert r.status_code == 200
        assert len(r.json()) == 8
        assert r.json()[0]["first_name"] == "Harry"

    def test_all_contracts_and_jobs(self, api_client):
        assert len(api_client.get("/allContracts").json()) == 9
        assert len(api_client.get("/jobs").json()) == 14


def test_root_and_health(api_client):
    assert api_client.get("/").json()["status"] == "healthy"
    r = api_client.get("/health")
    assert r.status_code == 200
    assert r.json()["database"]["connected"] is True
