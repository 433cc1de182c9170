"""
Tests for Paystack payment routes
"""

import pytest

INITIALIZE_PATH = "/transaction/initialize"


class TestInitializePayment:

    def test_initialize_converts_amount_and_reshapes(self, client, upstream):
        upstream.json("POST", INITIALIZE_PATH, {
            "status": True,
            "message": "Authorization URL created",
            "data": {
                "authorization_url": "https://checkout.paystack.com/abc",
                "access_code": "abc",
                "reference": "ref_123",
                "extra": "dropped"
            }
        })

        response = client.post("/paystack/initialize", json={
            "email": "ada@example.com",
            "amount": 10.5,
            "userId": "user-42"
        })

        assert response.status_code == 200
        assert response.json() == {
            "authorization_url": "https://checkout.paystack.com/abc",
            "access_code": "abc",
            "reference": "ref_123"
        }

        request = upstream.calls(INITIALIZE_PATH)[0]
        sent = upstream.body_of(request)
        assert sent["amount"] == 1050
        assert sent["email"] == "ada@example.com"
        assert sent["metadata"] == {"userId": "user-42"}
        assert sent["callback_url"] == "https://app.test/payment/callback"
        assert request.headers["Authorization"] == "Bearer sk_test_abc"
        assert request.headers["Content-Type"] == "application/json"

    def test_initialize_does_not_touch_ebills_token(self, client, upstream):
        upstream.json("POST", INITIALIZE_PATH, {"status": True, "data": {
            "authorization_url": "u", "access_code": "c", "reference": "r"
        }})

        client.post("/paystack/initialize", json={"email": "a@b.c", "amount": 100, "userId": "u1"})

        assert upstream.calls("/wp-json/jwt-auth/v1/token") == []

    def test_numeric_user_id_is_sent_as_string(self, client, upstream):
        upstream.json("POST", INITIALIZE_PATH, {"status": True, "data": {
            "authorization_url": "u", "access_code": "c", "reference": "r"
        }})

        response = client.post("/paystack/initialize", json={"email": "a@b.c", "amount": 100, "userId": 42})

        assert response.status_code == 200
        sent = upstream.body_of(upstream.calls(INITIALIZE_PATH)[0])
        assert sent["metadata"] == {"userId": "42"}

    def test_empty_user_id_is_400(self, client, upstream):
        response = client.post("/paystack/initialize", json={"email": "a@b.c", "amount": 100, "userId": ""})

        assert response.status_code == 400
        assert upstream.requests == []

    @pytest.mark.parametrize("missing", ["email", "amount", "userId"])
    def test_missing_field_is_400_without_upstream_call(self, client, upstream, missing):
        body = {"email": "ada@example.com", "amount": 10.5, "userId": "user-42"}
        del body[missing]

        response = client.post("/paystack/initialize", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert missing in data["error"]
        assert upstream.requests == []

    def test_upstream_rejection_status_is_relayed(self, client, upstream):
        upstream.json("POST", INITIALIZE_PATH, {"status": False, "message": "Invalid key"}, status_code=401)

        response = client.post("/paystack/initialize", json={"email": "a@b.c", "amount": 5, "userId": "u"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid key"}


class TestVerifyPayment:

    def test_successful_transaction(self, client, upstream):
        upstream.json("GET", "/transaction/verify/ref_123", {
            "status": True,
            "message": "Verification successful",
            "data": {
                "status": "success",
                "reference": "ref_123",
                "amount": 1050,
                "channel": "card",
                "currency": "NGN",
                "metadata": {"userId": "user-42"},
                "customer": {"email": "ada@example.com"}
            }
        })

        response = client.get("/paystack/verify", params={"reference": "ref_123"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Payment verified successfully",
            "userId": "user-42",
            "amount": 10.5,
            "reference": "ref_123",
            "email": "ada@example.com",
            "channel": "card",
            "currency": "NGN",
            "status": "success"
        }
        request = upstream.calls("/transaction/verify/ref_123")[0]
        assert request.headers["Authorization"] == "Bearer sk_test_abc"

    def test_failed_transaction_is_not_an_error(self, client, upstream):
        upstream.json("GET", "/transaction/verify/ref_9", {
            "status": True,
            "data": {"status": "failed", "reference": "ref_9", "amount": 1050}
        })

        response = client.get("/paystack/verify", params={"reference": "ref_9"})

        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "message": "Transaction was not successful",
            "status": "failed"
        }

    def test_empty_metadata_string(self, client, upstream):
        upstream.json("GET", "/transaction/verify/ref_1", {"status": True, "data": {
            "status": "success", "reference": "ref_1", "amount": 500, "metadata": ""
        }})

        response = client.get("/paystack/verify", params={"reference": "ref_1"})

        assert response.status_code == 200
        assert response.json()["userId"] is None
        assert response.json()["amount"] == 5.0

    def test_missing_reference(self, client, upstream):
        response = client.get("/paystack/verify")

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert upstream.requests == []

    def test_unknown_reference_relays_upstream_status(self, client, upstream):
        upstream.json("GET", "/transaction/verify/nope", {"status": False, "message": "Transaction reference not found"}, status_code=400)

        response = client.get("/paystack/verify", params={"reference": "nope"})

        assert response.status_code == 400
        assert response.json()["error"] == "Transaction reference not found"
