"""
Tests for withdrawal routes
"""


class TestBanks:

    def test_banks_are_deduplicated_in_order(self, client, upstream):
        upstream.json("GET", "/bank", {"status": True, "data": [
            {"code": "001", "name": "First Bank"},
            {"code": "001", "name": "First Bank (duplicate)"},
            {"code": "002", "name": "Second Bank"},
        ]})

        response = client.get("/withdrawal/banks")

        assert response.status_code == 200
        assert response.json() == {"banks": [
            {"code": "001", "name": "First Bank"},
            {"code": "002", "name": "Second Bank"},
        ]}
        request = upstream.calls("/bank")[0]
        assert request.url.params["country"] == "nigeria"
        assert request.headers["Authorization"] == "Bearer sk_test_abc"

    def test_bank_list_failure(self, client, upstream):
        upstream.json("GET", "/bank", {"status": False, "message": "Service unavailable"}, status_code=503)

        response = client.get("/withdrawal/banks")

        assert response.status_code == 503
        assert response.json() == {"success": False, "error": "Service unavailable"}


class TestResolveAccount:

    def test_short_account_number_is_rejected(self, client, upstream):
        response = client.post("/withdrawal/resolve-account", json={"accountNumber": "12345", "bankCode": "058"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Account number must be exactly 10 digits"}
        assert upstream.requests == []

    def test_non_digit_account_number_is_rejected(self, client, upstream):
        response = client.post("/withdrawal/resolve-account", json={"accountNumber": "12345abcde", "bankCode": "058"})

        assert response.status_code == 400
        assert upstream.requests == []

    def test_valid_account_number_is_resolved(self, client, upstream):
        upstream.json("GET", "/bank/resolve", {"status": True, "data": {
            "account_number": "1234567890",
            "account_name": "ADA OBI",
            "bank_id": 9
        }})

        response = client.post("/withdrawal/resolve-account", json={"accountNumber": "1234567890", "bankCode": "058"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "accountName": "ADA OBI", "accountNumber": "1234567890"}
        request = upstream.calls("/bank/resolve")[0]
        assert request.url.params["account_number"] == "1234567890"
        assert request.url.params["bank_code"] == "058"


class TestCreateRecipient:

    def test_create_recipient(self, client, upstream):
        upstream.json("POST", "/transferrecipient", {"status": True, "data": {"recipient_code": "RCP_abc"}}, status_code=201)

        response = client.post("/withdrawal/create-recipient", json={
            "accountName": "ADA OBI",
            "accountNumber": "1234567890",
            "bankCode": "058"
        })

        assert response.status_code == 200
        assert response.json() == {"success": True, "recipientCode": "RCP_abc"}
        sent = upstream.body_of(upstream.calls("/transferrecipient")[0])
        assert sent == {
            "type": "nuban",
            "name": "ADA OBI",
            "account_number": "1234567890",
            "bank_code": "058",
            "currency": "NGN"
        }

    def test_missing_bank_code(self, client, upstream):
        response = client.post("/withdrawal/create-recipient", json={"accountName": "A", "accountNumber": "1234567890"})

        assert response.status_code == 400
        assert "bankCode" in response.json()["error"]


class TestInitiateTransfer:

    def test_transfer_converts_amount(self, client, upstream):
        upstream.json("POST", "/transfer", {
            "status": True,
            "message": "Transfer has been queued",
            "data": {"reference": "wd_1", "transfer_code": "TRF_xyz", "status": "pending"}
        })

        response = client.post("/withdrawal/initiate-transfer", json={
            "amount": 2500.75,
            "recipientCode": "RCP_abc",
            "reference": "wd_1"
        })

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Transfer has been queued",
            "reference": "wd_1",
            "transferCode": "TRF_xyz"
        }
        sent = upstream.body_of(upstream.calls("/transfer")[0])
        assert sent["amount"] == 250075
        assert sent["recipient"] == "RCP_abc"
        assert sent["source"] == "balance"

    def test_missing_reference(self, client, upstream):
        response = client.post("/withdrawal/initiate-transfer", json={"amount": 100, "recipientCode": "RCP_abc"})

        assert response.status_code == 400
        assert upstream.requests == []

    def test_insufficient_balance_relays_status(self, client, upstream):
        upstream.json("POST", "/transfer", {"status": False, "message": "Your balance is not enough to fulfil this request"}, status_code=400)

        response = client.post("/withdrawal/initiate-transfer", json={
            "amount": 1000000,
            "recipientCode": "RCP_abc",
            "reference": "wd_2"
        })

        assert response.status_code == 400
        assert response.json()["error"] == "Your balance is not enough to fulfil this request"
