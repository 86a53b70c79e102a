from tests.conftest import create_account, create_payee, create_category, create_transaction


class TestAccountCreation:
    """Tests for creating accounts"""

    def test_create_account_success(self, client, auth_headers):
        """User can create an account"""
        data = {"name": "Chase Checking", "currencyType": "USD"}

        response = client.post("/accounts", headers=auth_headers, json=data)

        assert response.status_code == 201
        account = response.json()
        assert account["name"] == "Chase Checking"
        assert account["currencyType"] == "USD"
        assert "id" in account

    def test_create_account_all_currencies(self, client, auth_headers):
        """All supported currencies can be used"""
        for currency in ["USD", "CAD", "INR"]:
            response = client.post(
                "/accounts",
                headers=auth_headers,
                json={"name": f"Account {currency}", "currencyType": currency},
            )
            assert response.status_code == 201
            assert response.json()["currencyType"] == currency

    def test_create_account_unknown_currency(self, client, auth_headers):
        """Unsupported currency is a schema error"""
        response = client.post(
            "/accounts", headers=auth_headers, json={"name": "Euro", "currencyType": "EUR"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "SCHEMA_VALIDATION_FAILED"
        assert "body.currencyType" in body["errors"]

    def test_create_account_missing_name(self, client, auth_headers):
        """Creating account without name should fail"""
        response = client.post("/accounts", headers=auth_headers, json={"currencyType": "USD"})

        assert response.status_code == 400
        assert "body.name" in response.json()["errors"]

    def test_create_account_blank_name(self, client, auth_headers):
        """Whitespace-only names are rejected"""
        response = client.post(
            "/accounts", headers=auth_headers, json={"name": "   ", "currencyType": "USD"}
        )

        assert response.status_code == 400

    def test_create_account_duplicate_name(self, client, auth_headers):
        """Account names are unique per user"""
        create_account(client, auth_headers, name="Savings")

        response = client.post(
            "/accounts", headers=auth_headers, json={"name": "Savings", "currencyType": "CAD"}
        )

        assert response.status_code == 409
        body = response.json()
        assert body["message"] == "FinancialAccount with identifier Savings already exists"
        assert body["error"] == "Conflict"

    def test_same_name_for_different_users(self, client, user_a_headers, user_b_headers):
        """Uniqueness is scoped to the owner"""
        create_account(client, user_a_headers, name="Wallet")
        create_account(client, user_b_headers, name="Wallet")


class TestAccountRetrieval:
    """Tests for listing and fetching accounts"""

    def test_list_accounts_ordered_by_name(self, client, auth_headers):
        for name in ["Visa", "Amex", "Checking"]:
            create_account(client, auth_headers, name=name)

        response = client.get("/accounts", headers=auth_headers)

        assert response.status_code == 200
        assert [a["name"] for a in response.json()] == ["Amex", "Checking", "Visa"]

    def test_get_account(self, client, auth_headers):
        account = create_account(client, auth_headers, currency_type="CAD")

        response = client.get(f"/accounts/{account['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == account

    def test_get_account_not_found(self, client, auth_headers):
        response = client.get("/accounts/999", headers=auth_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["message"] == "FinancialAccount with id 999 not found"
        assert body["path"] == "/accounts/999"

    def test_cannot_access_other_users_account(self, client, user_a_headers, user_b_headers):
        """User B cannot see user A's account"""
        account = create_account(client, user_a_headers)

        response = client.get(f"/accounts/{account['id']}", headers=user_b_headers)

        assert response.status_code == 404


class TestAccountUpdate:
    """Tests for renaming and changing currency"""

    def test_update_account(self, client, auth_headers):
        account = create_account(client, auth_headers, name="Old")

        response = client.patch(
            f"/accounts/{account['id']}",
            headers=auth_headers,
            json={"name": "New", "currencyType": "INR"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "New"
        assert response.json()["currencyType"] == "INR"

    def test_rename_updates_transaction_snapshots(self, client, auth_headers):
        """Existing transactions show the new account name"""
        account = create_account(client, auth_headers, name="Old Name")
        payee = create_payee(client, auth_headers)
        category = create_category(client, auth_headers, "Misc")
        created = create_transaction(
            client,
            auth_headers,
            account["id"],
            payee["id"],
            splits=[{"categoryId": category["id"], "amount": 500}],
        ).json()

        client.patch(
            f"/accounts/{account['id']}",
            headers=auth_headers,
            json={"name": "New Name", "currencyType": "USD"},
        )

        transaction = client.get(f"/transactions/{created['id']}", headers=auth_headers).json()
        assert transaction["accountName"] == "New Name"

    def test_rename_to_existing_name_conflicts(self, client, auth_headers):
        create_account(client, auth_headers, name="Taken")
        account = create_account(client, auth_headers, name="Free")

        response = client.patch(
            f"/accounts/{account['id']}",
            headers=auth_headers,
            json={"name": "Taken", "currencyType": "USD"},
        )

        assert response.status_code == 409

        # The failed rename left the account untouched
        assert client.get(f"/accounts/{account['id']}", headers=auth_headers).json()["name"] == "Free"


class TestAccountDeletion:
    """Tests for soft deleting accounts"""

    def test_delete_account(self, client, auth_headers):
        account = create_account(client, auth_headers)

        response = client.delete(f"/accounts/{account['id']}", headers=auth_headers)

        assert response.status_code == 204
        assert client.get(f"/accounts/{account['id']}", headers=auth_headers).status_code == 404
        assert client.get("/accounts", headers=auth_headers).json() == []

    def test_deleted_name_can_be_reused(self, client, auth_headers):
        """Uniqueness only applies to live accounts"""
        account = create_account(client, auth_headers, name="Reused")
        client.delete(f"/accounts/{account['id']}", headers=auth_headers)

        recreated = create_account(client, auth_headers, name="Reused")

        assert recreated["id"] != account["id"]

    def test_delete_twice_is_not_found(self, client, auth_headers):
        account = create_account(client, auth_headers)
        client.delete(f"/accounts/{account['id']}", headers=auth_headers)

        response = client.delete(f"/accounts/{account['id']}", headers=auth_headers)

        assert response.status_code == 404

    def test_deleted_account_keeps_transactions(self, client, auth_headers, ledger):
        account_id = ledger["account"]["id"]
        created = create_transaction(
            client,
            auth_headers,
            account_id,
            ledger["payee"]["id"],
            splits=[{"categoryId": ledger["transport"]["id"], "amount": 450}],
        ).json()

        client.delete(f"/accounts/{account_id}", headers=auth_headers)

        response = client.get(f"/transactions/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        transaction = response.json()
        assert transaction["accountName"] == ledger["account"]["name"]
        assert transaction["currencyCode"] == "USD"
        assert transaction["totalAmount"] == 450
