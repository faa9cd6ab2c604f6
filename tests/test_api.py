from conftest import PASSWORD, auth_headers, make_account
from fiscal.config import settings


def test_requests_without_session_are_unauthorized(client) -> None:
    resp = client.get("/v1/accounts")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"

    resp = client.get("/v1/accounts", headers={"Authorization": "Bearer forged.token.value"})
    assert resp.status_code == 401


def test_health_needs_no_session(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_signup_login_and_cookie_session(client) -> None:
    resp = client.post("/v1/auth/signup", json={"email": "Carol@Example.com", "password": PASSWORD, "name": "Carol"})
    assert resp.status_code == 201
    assert resp.json()["user"]["email"] == "carol@example.com"

    # the signup cookie authenticates follow-up requests
    assert client.get("/v1/auth/me").json()["name"] == "Carol"

    dup = client.post("/v1/auth/signup", json={"email": "carol@example.com", "password": PASSWORD})
    assert dup.status_code == 409
    assert dup.json()["error"]["code"] == "DUPLICATE"

    client.post("/v1/auth/logout")
    client.cookies.clear()
    assert client.get("/v1/auth/me").status_code == 401

    bad = client.post("/v1/auth/login", json={"email": "carol@example.com", "password": "wrong-password"})
    assert bad.status_code == 401

    ok = client.post("/v1/auth/login", json={"email": "carol@example.com", "password": PASSWORD})
    assert ok.status_code == 200
    token = ok.json()["token"]
    client.cookies.clear()
    assert client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 200


def test_transaction_lifecycle_over_http(client, alice, food, salary) -> None:
    headers = auth_headers(alice)

    acct = client.post(
        "/v1/accounts", headers=headers,
        json={"name": "BCA", "type": "bank", "balance": "1000000"},
    ).json()
    assert acct["balance"] == "1000000"
    assert acct["currency"] == "IDR"

    expense = client.post(
        "/v1/transactions", headers=headers,
        json={
            "account_id": acct["id"], "category_id": food.id, "type": "expense",
            "amount": "250000", "date": "2025-01-15", "description": "Groceries",
        },
    )
    assert expense.status_code == 201
    assert expense.json()["amount"] == "250000"
    assert expense.json()["date"] == "2025-01-15"

    client.post(
        "/v1/transactions", headers=headers,
        json={"account_id": acct["id"], "category_id": salary.id, "type": "income", "amount": "500000", "date": "2025-01-20"},
    )
    assert client.get(f"/v1/accounts/{acct['id']}", headers=headers).json()["balance"] == "1250000"

    listed = client.get("/v1/transactions", headers=headers).json()
    assert [t["date"] for t in listed] == ["2025-01-20", "2025-01-15"]

    patched = client.patch(
        f"/v1/transactions/{expense.json()['id']}", headers=headers, json={"amount": "200000"},
    )
    assert patched.status_code == 200
    assert client.get(f"/v1/accounts/{acct['id']}", headers=headers).json()["balance"] == "1300000"

    deleted = client.delete(f"/v1/transactions/{expense.json()['id']}", headers=headers)
    assert deleted.json() == {"success": True}
    assert client.get("/v1/accounts/total-balance", headers=headers).json() == {"total": "1500000"}


def test_invalid_amounts_are_validation_errors(client, db, alice, food) -> None:
    acct = make_account(db, alice)
    headers = auth_headers(alice)
    for amount in ("0", "-50"):
        resp = client.post(
            "/v1/transactions", headers=headers,
            json={"account_id": acct.id, "category_id": food.id, "type": "expense", "amount": amount, "date": "2025-01-01"},
        )
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    resp = client.post(
        "/v1/transactions", headers=headers,
        json={"account_id": acct.id, "category_id": food.id, "type": "expense", "amount": "0.01", "date": "2025-01-01"},
    )
    assert resp.status_code == 201


def test_mismatched_category_is_rejected(client, db, alice, food) -> None:
    acct = make_account(db, alice)
    resp = client.post(
        "/v1/transactions", headers=auth_headers(alice),
        json={"account_id": acct.id, "category_id": food.id, "type": "income", "amount": "10", "date": "2025-01-01"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["details"][0]["field"] == "category_id"


def test_cross_owner_access_is_not_found(client, db, alice, bob, food) -> None:
    acct = make_account(db, alice)
    txn = client.post(
        "/v1/transactions", headers=auth_headers(alice),
        json={"account_id": acct.id, "category_id": food.id, "type": "expense", "amount": "10", "date": "2025-01-01"},
    ).json()

    intruder = auth_headers(bob)
    assert client.get(f"/v1/accounts/{acct.id}", headers=intruder).status_code == 404
    assert client.get(f"/v1/transactions/{txn['id']}", headers=intruder).status_code == 404
    assert client.patch(f"/v1/transactions/{txn['id']}", headers=intruder, json={"amount": "1"}).status_code == 404
    resp = client.delete(f"/v1/transactions/{txn['id']}", headers=intruder)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


def test_system_category_mutation_is_forbidden(client, alice, food) -> None:
    resp = client.patch(f"/v1/categories/{food.id}", headers=auth_headers(alice), json={"name": "Snacks"})
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"
    assert client.delete(f"/v1/categories/{food.id}", headers=auth_headers(alice)).status_code == 403


def test_budget_progress_over_http(client, db, alice, food) -> None:
    headers = auth_headers(alice)
    acct = make_account(db, alice, balance="5000000")

    budget = client.post(
        "/v1/budgets", headers=headers,
        json={"category_id": food.id, "amount": "1000000", "period": "monthly",
              "start_date": "2025-01-01", "end_date": "2025-01-31"},
    ).json()
    for amount in ("500000", "450000"):
        client.post(
            "/v1/transactions", headers=headers,
            json={"account_id": acct.id, "category_id": food.id, "type": "expense", "amount": amount, "date": "2025-01-10"},
        )

    progress = client.get(f"/v1/budgets/{budget['id']}/progress", headers=headers).json()
    assert progress["spent"] == "950000"
    assert progress["remaining"] == "50000"
    assert progress["percentage"] == "95.00"
    assert progress["is_over_budget"] is False
    assert progress["budget"]["id"] == budget["id"]

    bad_window = client.post(
        "/v1/budgets", headers=headers,
        json={"category_id": food.id, "amount": "1", "start_date": "2025-02-01", "end_date": "2025-01-01"},
    )
    assert bad_window.status_code == 422


def test_goal_add_money_over_http(client, alice) -> None:
    headers = auth_headers(alice)
    goal = client.post("/v1/goals", headers=headers, json={"name": "Trip", "target_amount": "1000"}).json()
    resp = client.post(f"/v1/goals/{goal['id']}/add-money", headers=headers, json={"amount": "1000"})
    assert resp.json()["current_amount"] == "1000"
    assert resp.json()["is_completed"] is True


def test_password_longer_than_bcrypt_accepts_is_a_validation_error(client) -> None:
    resp = client.post("/v1/auth/signup", json={"email": "dave@example.com", "password": "é" * 64})
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    assert resp.json()["error"]["details"][0]["field"] == "body.password"

    resp = client.post("/v1/auth/login", json={"email": "dave@example.com", "password": "é" * 64})
    assert resp.status_code == 401


def test_account_currency_defaults_to_configured_currency(client, alice, monkeypatch) -> None:
    monkeypatch.setattr(settings, "default_currency", "USD")
    headers = auth_headers(alice)

    acct = client.post("/v1/accounts", headers=headers, json={"name": "Chase", "type": "bank"}).json()
    assert acct["currency"] == "USD"

    acct = client.post("/v1/accounts", headers=headers, json={"name": "Revolut", "type": "bank", "currency": "eur"}).json()
    assert acct["currency"] == "EUR"


def test_oversized_amount_is_a_validation_error(client, db, alice, food) -> None:
    acct = make_account(db, alice)
    resp = client.post(
        "/v1/transactions", headers=auth_headers(alice),
        json={"account_id": acct.id, "category_id": food.id, "type": "expense",
              "amount": "100000000000000000000000", "date": "2025-01-01"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
