from tests.conftest import create_category, create_transaction


class TestCategoryCreation:
    """Tests for top-level categories and subcategories"""

    def test_create_top_level_category(self, client, auth_headers):
        response = client.post("/categories", headers=auth_headers, json={"name": "Food"})

        assert response.status_code == 201
        category = response.json()
        assert category["name"] == "Food"
        assert category["fullName"] == "food"
        assert category["parentId"] is None
        assert category["parentName"] is None

    def test_create_subcategory(self, client, auth_headers):
        food = create_category(client, auth_headers, "Food")

        response = client.post(
            "/categories/subcategory",
            headers=auth_headers,
            json={"name": "Dining Out", "parentId": food["id"]},
        )

        assert response.status_code == 201
        category = response.json()
        assert category["fullName"] == "food:dining out"
        assert category["parentId"] == food["id"]
        assert category["parentName"] == "Food"

    def test_cannot_nest_below_subcategory(self, client, auth_headers):
        """Categories are at most two levels deep"""
        food = create_category(client, auth_headers, "Food")
        groceries = create_category(client, auth_headers, "Groceries", parent_id=food["id"])

        response = client.post(
            "/categories/subcategory",
            headers=auth_headers,
            json={"name": "Produce", "parentId": groceries["id"]},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot create subcategory of a subcategory"

    def test_subcategory_with_missing_parent(self, client, auth_headers):
        response = client.post(
            "/categories/subcategory", headers=auth_headers, json={"name": "Orphan", "parentId": 77}
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Category with id 77 not found"

    def test_duplicate_full_name_conflicts(self, client, auth_headers):
        """Names are compared through the lowercased path"""
        create_category(client, auth_headers, "Food")

        response = client.post("/categories", headers=auth_headers, json={"name": "FOOD"})

        assert response.status_code == 409

    def test_same_child_name_under_different_parents(self, client, auth_headers):
        food = create_category(client, auth_headers, "Food")
        home = create_category(client, auth_headers, "Home")

        create_category(client, auth_headers, "Supplies", parent_id=food["id"])
        create_category(client, auth_headers, "Supplies", parent_id=home["id"])


class TestCategoryRetrieval:
    """Tests for listing, fetching and the tree view"""

    def test_list_categories_ordered_by_name(self, client, auth_headers):
        transport = create_category(client, auth_headers, "Transport")
        create_category(client, auth_headers, "Bus", parent_id=transport["id"])
        create_category(client, auth_headers, "Food")

        response = client.get("/categories", headers=auth_headers)

        assert response.status_code == 200
        categories = response.json()
        assert [c["name"] for c in categories] == ["Bus", "Food", "Transport"]
        assert categories[0]["parentName"] == "Transport"

    def test_get_category(self, client, auth_headers):
        food = create_category(client, auth_headers, "Food")

        response = client.get(f"/categories/{food['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == food

    def test_category_tree(self, client, auth_headers):
        food = create_category(client, auth_headers, "Food")
        groceries = create_category(client, auth_headers, "Groceries", parent_id=food["id"])
        dining = create_category(client, auth_headers, "Dining", parent_id=food["id"])
        rent = create_category(client, auth_headers, "Rent")

        response = client.get("/categories/tree", headers=auth_headers)

        assert response.status_code == 200
        tree = {node["label"]: node for node in response.json()}
        assert set(tree) == {"Food", "Rent"}
        assert tree["Food"]["id"] == food["id"]
        assert sorted(tree["Food"]["children"], key=lambda c: c["id"]) == [
            {"id": groceries["id"], "label": "Groceries"},
            {"id": dining["id"], "label": "Dining"},
        ]
        assert tree["Rent"] == {"id": rent["id"], "label": "Rent", "children": []}


class TestCategoryRename:
    """Renames propagate to subcategories and transaction splits"""

    def test_rename_top_level_updates_children(self, client, auth_headers):
        food = create_category(client, auth_headers, "Food")
        groceries = create_category(client, auth_headers, "Groceries", parent_id=food["id"])

        response = client.patch(f"/categories/{food['id']}", headers=auth_headers, json={"name": "X"})

        assert response.status_code == 200
        assert response.json()["fullName"] == "x"

        child = client.get(f"/categories/{groceries['id']}", headers=auth_headers).json()
        assert child["fullName"] == "x:groceries"
        assert child["parentName"] == "X"

    def test_rename_updates_split_snapshots(self, client, auth_headers, ledger):
        created = create_transaction(
            client,
            auth_headers,
            ledger["account"]["id"],
            ledger["payee"]["id"],
            splits=[
                {"categoryId": ledger["groceries"]["id"], "amount": 700},
                {"categoryId": ledger["transport"]["id"], "amount": 300},
            ],
        ).json()
        assert created["categoryName"] == "food, transport"

        client.patch(
            f"/categories/{ledger['food']['id']}", headers=auth_headers, json={"name": "Essentials"}
        )

        transaction = client.get(f"/transactions/{created['id']}", headers=auth_headers).json()
        assert transaction["splits"][0]["categoryFullName"] == "essentials:groceries"
        assert transaction["splits"][1]["categoryFullName"] == "transport"
        assert transaction["categoryName"] == "essentials, transport"

    def test_rename_reaches_deleted_subcategory_splits(self, client, auth_headers, ledger):
        dining = create_category(client, auth_headers, "Dining", parent_id=ledger["food"]["id"])
        created = create_transaction(
            client,
            auth_headers,
            ledger["account"]["id"],
            ledger["payee"]["id"],
            splits=[{"categoryId": dining["id"], "amount": 900}],
        ).json()
        client.delete(f"/categories/{dining['id']}", headers=auth_headers)

        response = client.patch(
            f"/categories/{ledger['food']['id']}", headers=auth_headers, json={"name": "Essentials"}
        )

        assert response.status_code == 200
        transaction = client.get(f"/transactions/{created['id']}", headers=auth_headers).json()
        assert transaction["splits"][0]["categoryFullName"] == "essentials:dining"
        assert transaction["categoryName"] == "essentials"

    def test_rename_subcategory(self, client, auth_headers, ledger):
        response = client.patch(
            f"/categories/{ledger['groceries']['id']}",
            headers=auth_headers,
            json={"name": "Supermarket"},
        )

        assert response.status_code == 200
        assert response.json()["fullName"] == "food:supermarket"

    def test_rename_conflict(self, client, auth_headers):
        create_category(client, auth_headers, "Food")
        home = create_category(client, auth_headers, "Home")

        response = client.patch(f"/categories/{home['id']}", headers=auth_headers, json={"name": "food"})

        assert response.status_code == 409
        unchanged = client.get(f"/categories/{home['id']}", headers=auth_headers).json()
        assert unchanged["fullName"] == "home"


class TestCategoryDeletion:
    """Soft deleting categories"""

    def test_delete_top_level_deletes_children(self, client, auth_headers):
        food = create_category(client, auth_headers, "Food")
        groceries = create_category(client, auth_headers, "Groceries", parent_id=food["id"])

        response = client.delete(f"/categories/{food['id']}", headers=auth_headers)

        assert response.status_code == 204
        assert client.get(f"/categories/{groceries['id']}", headers=auth_headers).status_code == 404
        assert client.get("/categories", headers=auth_headers).json() == []

    def test_delete_subcategory_keeps_parent(self, client, auth_headers):
        food = create_category(client, auth_headers, "Food")
        groceries = create_category(client, auth_headers, "Groceries", parent_id=food["id"])

        client.delete(f"/categories/{groceries['id']}", headers=auth_headers)

        tree = client.get("/categories/tree", headers=auth_headers).json()
        assert tree == [{"id": food["id"], "label": "Food", "children": []}]

    def test_deleted_category_keeps_transaction_splits(self, client, auth_headers, ledger):
        created = create_transaction(
            client,
            auth_headers,
            ledger["account"]["id"],
            ledger["payee"]["id"],
            splits=[
                {"categoryId": ledger["groceries"]["id"], "amount": 700},
                {"categoryId": ledger["transport"]["id"], "amount": 300},
            ],
        ).json()

        client.delete(f"/categories/{ledger['food']['id']}", headers=auth_headers)

        transaction = client.get(f"/transactions/{created['id']}", headers=auth_headers)
        assert transaction.status_code == 200
        assert [s["categoryFullName"] for s in transaction.json()["splits"]] == [
            "food:groceries",
            "transport",
        ]
        assert transaction.json()["categoryName"] == "food, transport"

        report = client.get(
            "/reports/spendings/categories",
            headers=auth_headers,
            params={
                "startOfMonth": "2024-03-01",
                "endOfMonth": "2024-03-31",
                "accountId": ledger["account"]["id"],
                "transactionType": "EXPENSE",
            },
        ).json()
        assert report["totalAmount"] == 1000
        assert [(n["categoryName"], n["totalAmount"]) for n in report["categoryTree"]] == [
            ("food", 700),
            ("transport", 300),
        ]

    def test_deleted_category_rejected_in_new_transactions(self, client, auth_headers, ledger):
        client.delete(f"/categories/{ledger['transport']['id']}", headers=auth_headers)

        response = create_transaction(
            client,
            auth_headers,
            ledger["account"]["id"],
            ledger["payee"]["id"],
            splits=[{"categoryId": ledger["transport"]["id"], "amount": 100}],
        )

        assert response.status_code == 404
