"""API tests for expense records, summaries and totals."""

from tests.conftest import auth


class TestAddAndList:
    def test_add_expense(self, client, owner_id, car_id) -> None:
        resp = client.post(
            "/expenses/",
            json={
                "car_id": car_id,
                "category": "fuel",
                "description": "Fill up",
                "amount": "45.10",
                "expense_date": "2024-03-01T12:00:00+02:00",
                "vendor": " ",
            },
            headers=auth(owner_id),
        )
        body = resp.json()

        assert resp.status_code == 201
        assert body["user_id"] == owner_id
        assert body["amount"] == 45.1
        assert body["expense_date"] == "2024-03-01T10:00:00"
        assert body["vendor"] is None

    def test_unknown_category_rejected(self, client, owner_id, car_id) -> None:
        resp = client.post(
            "/expenses/",
            json={"car_id": car_id, "category": "snacks", "description": "x", "amount": 1, "expense_date": "2024-03-01T00:00:00"},
            headers=auth(owner_id),
        )

        assert resp.status_code == 422

    def test_negative_amount_rejected(self, client, owner_id, car_id) -> None:
        resp = client.post(
            "/expenses/",
            json={"car_id": car_id, "category": "fuel", "description": "x", "amount": -1, "expense_date": "2024-03-01T00:00:00"},
            headers=auth(owner_id),
        )

        assert resp.status_code == 422

    def test_add_to_unshared_car(self, client, other_id, car_id) -> None:
        resp = client.post(
            "/expenses/",
            json={"car_id": car_id, "category": "fuel", "description": "x", "amount": 1, "expense_date": "2024-03-01T00:00:00"},
            headers=auth(other_id),
        )

        assert resp.status_code == 403

    def test_list_newest_first(self, client, owner_id, car_id, add_expense) -> None:
        older = add_expense(owner_id, car_id, 30, "2024-01-05T00:00:00", category="fuel")
        newer = add_expense(owner_id, car_id, 60, "2024-02-05T00:00:00", category="repair")

        resp = client.get(f"/expenses/car/{car_id}", headers=auth(owner_id))

        assert [e["expense_id"] for e in resp.json()] == [newer, older]

    def test_filter_by_category(self, client, owner_id, car_id, add_expense) -> None:
        add_expense(owner_id, car_id, 30, "2024-01-05T00:00:00", category="fuel")
        payment = add_expense(owner_id, car_id, 100, "2024-02-05T00:00:00")

        resp = client.get(f"/expenses/car/{car_id}", params={"category": "loan_payment"}, headers=auth(owner_id))

        assert [e["expense_id"] for e in resp.json()] == [payment]

    def test_shared_user_sees_expenses(self, client, owner_id, other_id, car_id, add_expense) -> None:
        add_expense(owner_id, car_id, 30, "2024-01-05T00:00:00", category="fuel")
        client.post(f"/cars/{car_id}/shares", json={"user_email": "other@example.com"}, headers=auth(owner_id))

        resp = client.get(f"/expenses/car/{car_id}", headers=auth(other_id))

        assert resp.status_code == 200
        assert len(resp.json()) == 1

    def test_list_unknown_car(self, client, owner_id) -> None:
        resp = client.get("/expenses/car/999", headers=auth(owner_id))

        assert resp.status_code == 404


class TestSummaryAndTotals:
    def test_summary_includes_down_payments(self, client, owner_id, car_id, add_expense) -> None:
        add_expense(owner_id, car_id, 30, "2024-01-05T00:00:00", category="fuel")
        add_expense(owner_id, car_id, 20.5, "2024-01-20T00:00:00", category="fuel")
        add_expense(owner_id, car_id, 100, "2024-02-05T00:00:00")
        client.put(
            f"/cars/{car_id}/purchase",
            json={"down_payments": [{"type": "cash", "amount": 1000}, {"type": "check", "amount": 500}]},
            headers=auth(owner_id),
        )

        body = client.get(f"/expenses/car/{car_id}/summary", headers=auth(owner_id)).json()

        assert body == {
            "total_expenses": 1650.5,
            "category_totals": {"fuel": 50.5, "loan_payment": 100.0, "down_payments": 1500.0},
            "expense_count": 3,
        }

    def test_empty_summary(self, client, owner_id, car_id) -> None:
        body = client.get(f"/expenses/car/{car_id}/summary", headers=auth(owner_id)).json()

        assert body == {"total_expenses": 0.0, "category_totals": {}, "expense_count": 0}

    def test_totals_across_owned_and_shared(self, client, owner_id, other_id, car_id, make_car, add_expense) -> None:
        own_car = make_car(other_id, make="Mazda", model="3")
        add_expense(other_id, own_car, 40, "2024-01-05T00:00:00", category="fuel")
        add_expense(owner_id, car_id, 60, "2024-01-06T00:00:00", category="fuel")
        client.post(f"/cars/{car_id}/shares", json={"user_email": "other@example.com"}, headers=auth(owner_id))

        body = client.get("/expenses/totals", headers=auth(other_id)).json()

        assert body == {"total_expenses": 100.0, "car_count": 2}

    def test_totals_skip_archived(self, client, owner_id, car_id, add_expense) -> None:
        add_expense(owner_id, car_id, 60, "2024-01-06T00:00:00", category="fuel")
        client.post(f"/cars/{car_id}/archive", json={"reason": "sold"}, headers=auth(owner_id))

        body = client.get("/expenses/totals", headers=auth(owner_id)).json()

        assert body == {"total_expenses": 0.0, "car_count": 0}


class TestUpdateAndDelete:
    def test_update(self, client, owner_id, car_id, add_expense) -> None:
        expense_id = add_expense(owner_id, car_id, 100, "2024-02-05T00:00:00")

        resp = client.put(
            f"/expenses/{expense_id}",
            json={"amount": 125, "principal_amount": 110, "interest_amount": 15},
            headers=auth(owner_id),
        )
        body = resp.json()

        assert resp.status_code == 200
        assert body["amount"] == 125.0
        assert body["principal_amount"] == 110.0
        assert body["description"] == "Loan payment"

    def test_null_required_field(self, client, owner_id, car_id, add_expense) -> None:
        expense_id = add_expense(owner_id, car_id, 100, "2024-02-05T00:00:00")

        resp = client.put(f"/expenses/{expense_id}", json={"amount": None}, headers=auth(owner_id))

        assert resp.status_code == 400

    def test_update_by_stranger(self, client, owner_id, other_id, car_id, add_expense) -> None:
        expense_id = add_expense(owner_id, car_id, 100, "2024-02-05T00:00:00")

        resp = client.put(f"/expenses/{expense_id}", json={"amount": 1}, headers=auth(other_id))

        assert resp.status_code == 403

    def test_delete(self, client, owner_id, car_id, add_expense) -> None:
        expense_id = add_expense(owner_id, car_id, 100, "2024-02-05T00:00:00")

        resp = client.delete(f"/expenses/{expense_id}", headers=auth(owner_id))

        assert resp.status_code == 200
        assert client.get(f"/expenses/car/{car_id}", headers=auth(owner_id)).json() == []

    def test_delete_missing(self, client, owner_id) -> None:
        resp = client.delete("/expenses/999", headers=auth(owner_id))

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Expense not found"

    def test_deleted_payment_leaves_loan_balance(self, client, owner_id, car_id, set_loan, add_expense) -> None:
        set_loan(owner_id, car_id)
        expense_id = add_expense(owner_id, car_id, 100, "2024-02-10T00:00:00")
        client.delete(f"/expenses/{expense_id}", headers=auth(owner_id))

        body = client.get(
            f"/loans/{car_id}/next-payment", params={"as_of": "2024-02-01T00:00:00"}, headers=auth(owner_id)
        ).json()

        assert body["remainingBalance"] == 1200.0
