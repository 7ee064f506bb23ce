from config import settings
from models.category import Category
from utils.tokenJWT import create_access_token, create_user_token

CATEGORY = {"name": "category1", "description": "description1"}


def test_reads_are_public(client):
    assert client.get("/categories").status_code == 200
    assert client.get("/products").status_code == 200
    assert client.get("/users").status_code == 200


def test_missing_token(client, db_session):
    r = client.post("/categories", json=CATEGORY)
    assert r.status_code == 401
    assert r.json()["detail"] == "Access denied. No token provided."
    assert db_session.query(Category).count() == 0


def test_invalid_token(client):
    r = client.post("/categories", json=CATEGORY, headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid token."


def test_token_signed_with_another_key(client):
    from jose import jwt

    token = jwt.encode({"sub": "5f0c2a1b9d3e4f5a6b7c8d9e", "isAdmin": True}, "another-key", algorithm="HS256")
    r = client.post("/categories", json=CATEGORY, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 400


def test_token_of_deleted_user(client, make_user, db_session):
    user = make_user(is_admin=True)
    headers = {"Authorization": f"Bearer {create_user_token(user)}"}
    db_session.delete(user)
    db_session.commit()

    assert client.post("/categories", json=CATEGORY, headers=headers).status_code == 400


def test_verification_token_is_not_a_credential(client):
    token = create_access_token({"email": "admin@example.com", "purpose": "verify-email"})
    r = client.post("/categories", json=CATEGORY, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 400


def test_non_admin_is_forbidden(client, user_headers, db_session):
    r = client.post("/categories", json=CATEGORY, headers=user_headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "Access denied. Admin privileges required."
    assert db_session.query(Category).count() == 0


def test_admin_flag_comes_from_the_stored_user(client, make_user):
    # A token claiming admin rights is not enough once the account is a plain user
    user = make_user()
    token = create_access_token({"sub": user.id, "isAdmin": True})
    r = client.post("/categories", json=CATEGORY, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


def test_admin_is_allowed(client, admin_headers):
    assert client.post("/categories", json=CATEGORY, headers=admin_headers).status_code == 200


def test_authentication_runs_before_validation_of_the_target(client, user_headers):
    assert client.delete("/categories/1", headers=user_headers).status_code == 403


def test_orders_are_public_by_default(client, make_user, make_product):
    user = make_user()
    product = make_product()
    body = {
        "user_id": user.id,
        "products": [{"product_id": product.id, "quantity": 1, "price": 10}],
        "total_price": 10,
        "status": "Pending",
    }
    assert client.post("/orders", json=body).status_code == 200


def test_policy_user_requires_any_authenticated_caller(client, monkeypatch, user_headers, make_user):
    monkeypatch.setitem(settings.ROUTE_POLICIES, "orders", "user")
    user = make_user()
    body = {"user_id": user.id, "products": [], "total_price": 0, "status": "Pending"}

    assert client.post("/orders", json=body).status_code == 401
    assert client.post("/orders", json=body, headers=user_headers).status_code == 200


def test_policy_admin_on_orders(client, monkeypatch, user_headers, admin_headers, make_user):
    monkeypatch.setitem(settings.ROUTE_POLICIES, "orders", "admin")
    user = make_user()
    body = {"user_id": user.id, "products": [], "total_price": 0, "status": "Pending"}

    assert client.post("/orders", json=body, headers=user_headers).status_code == 403
    assert client.post("/orders", json=body, headers=admin_headers).status_code == 200


def test_policy_public_on_categories(client, monkeypatch):
    monkeypatch.setitem(settings.ROUTE_POLICIES, "categories", "public")
    assert client.post("/categories", json=CATEGORY).status_code == 200


def test_me_requires_token(client):
    assert client.get("/me").status_code == 401
