from models.category import Category

MISSING_ID = "5f0c2a1b9d3e4f5a6b7c8d9e"


def test_list_categories_sorted_by_name(client, make_category):
    make_category(name="zeta category")
    make_category(name="alpha category")

    r = client.get("/categories")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()] == ["alpha category", "zeta category"]


def test_create_category_and_list_it(client, admin_headers):
    r = client.post("/categories", json={"name": "category1", "description": "description1"}, headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "category1"
    assert len(body["id"]) == 24
    int(body["id"], 16)

    r = client.get("/categories")
    assert [c["id"] for c in r.json()] == [body["id"]]


def test_create_category_missing_field_writes_nothing(client, admin_headers, db_session):
    r = client.post("/categories", json={"description": "description"}, headers=admin_headers)
    assert r.status_code == 400
    assert '"name"' in r.json()["detail"]
    assert db_session.query(Category).count() == 0


def test_create_category_name_too_short(client, admin_headers):
    r = client.post("/categories", json={"name": "cat", "description": "description1"}, headers=admin_headers)
    assert r.status_code == 400


def test_create_category_duplicate_name(client, admin_headers, make_category, db_session):
    make_category(name="category1")
    r = client.post("/categories", json={"name": "category1", "description": "description2"}, headers=admin_headers)
    assert r.status_code == 400
    assert db_session.query(Category).count() == 1


def test_get_category(client, make_category):
    category = make_category()
    r = client.get(f"/categories/{category.id}")
    assert r.status_code == 200
    assert r.json()["description"] == "description1"


def test_get_category_malformed_id(client):
    assert client.get("/categories/1").status_code == 404


def test_update_category(client, admin_headers, make_category, db_session):
    category = make_category()
    r = client.put(
        f"/categories/{category.id}",
        json={"name": "updatedName", "description": "updatedDescription"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json()["name"] == "updatedName"

    db_session.expire_all()
    assert db_session.get(Category, category.id).description == "updatedDescription"


def test_update_category_invalid_body(client, admin_headers, make_category):
    category = make_category()
    r = client.put(f"/categories/{category.id}", json={"description": "description"}, headers=admin_headers)
    assert r.status_code == 400


def test_update_category_not_found(client, admin_headers):
    r = client.put(
        f"/categories/{MISSING_ID}",
        json={"name": "category1", "description": "description1"},
        headers=admin_headers,
    )
    assert r.status_code == 404


def test_update_category_keeps_own_name(client, admin_headers, make_category):
    category = make_category(name="category1")
    r = client.put(
        f"/categories/{category.id}",
        json={"name": "category1", "description": "new description"},
        headers=admin_headers,
    )
    assert r.status_code == 200


def test_delete_category(client, admin_headers, make_category, db_session):
    category = make_category()
    r = client.delete(f"/categories/{category.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["id"] == category.id
    assert db_session.query(Category).count() == 0


def test_delete_category_twice_returns_404(client, admin_headers, make_category):
    category = make_category()
    assert client.delete(f"/categories/{category.id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/categories/{category.id}", headers=admin_headers).status_code == 404


def test_delete_category_with_products_is_refused(client, admin_headers, make_category, make_product, db_session):
    category = make_category()
    make_product(category=category)

    r = client.delete(f"/categories/{category.id}", headers=admin_headers)
    assert r.status_code == 400
    assert "associated with existing products" in r.json()["detail"]
    assert "Count: 1" in r.json()["detail"]
    assert db_session.query(Category).filter(Category.id == category.id).count() == 1


def test_create_category_duplicate_caught_by_the_database(client, admin_headers, make_category, monkeypatch, db_session):
    # A concurrent request committed the same name after this one passed its own check
    make_category(name="category1")
    monkeypatch.setattr("routes.categories.ensure_unique", lambda *args, **kwargs: None)

    r = client.post("/categories", json={"name": "category1", "description": "description1"}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Category name already exists."
    assert db_session.query(Category).filter(Category.name == "category1").count() == 1
