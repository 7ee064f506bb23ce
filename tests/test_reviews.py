from models.review import Review

MISSING_ID = "5f0c2a1b9d3e4f5a6b7c8d9e"


def test_list_reviews(client, make_user, make_product, make_review):
    user, product = make_user(), make_product()
    make_review(user, product, rating=5)
    make_review(user, product, rating=3)

    r = client.get("/reviews")
    assert r.status_code == 200
    assert sorted(rv["rating"] for rv in r.json()) == [3, 5]


def test_get_review(client, make_user, make_product, make_review):
    review = make_review(make_user(), make_product(), comment="Great!")
    r = client.get(f"/reviews/{review.id}")
    assert r.status_code == 200
    assert r.json()["comment"] == "Great!"


def test_get_review_not_found(client):
    assert client.get(f"/reviews/{MISSING_ID}").status_code == 404


def test_create_review(client, make_user, make_product):
    user, product = make_user(), make_product()
    r = client.post("/reviews", json={
        "product_id": product.id, "user_id": user.id, "rating": 5, "comment": "Great!",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["rating"] == 5
    assert body["review_date"]


def test_create_review_invalid_body(client, db_session):
    r = client.post("/reviews", json={"comment": "Great!"})
    assert r.status_code == 400
    assert db_session.query(Review).count() == 0


def test_create_review_rating_out_of_range(client, make_user, make_product):
    user, product = make_user(), make_product()
    r = client.post("/reviews", json={"product_id": product.id, "user_id": user.id, "rating": 6})
    assert r.status_code == 400
    assert '"rating"' in r.json()["detail"]


def test_create_review_comment_too_long(client, make_user, make_product):
    user, product = make_user(), make_product()
    r = client.post("/reviews", json={
        "product_id": product.id, "user_id": user.id, "rating": 4, "comment": "x" * 1025,
    })
    assert r.status_code == 400


def test_create_review_unknown_user(client, make_product, db_session):
    product = make_product()
    r = client.post("/reviews", json={"product_id": product.id, "user_id": MISSING_ID, "rating": 4})
    assert r.status_code == 400
    assert "user_id" in r.json()["detail"]
    assert db_session.query(Review).count() == 0


def test_create_review_unknown_product(client, make_user, db_session):
    user = make_user()
    r = client.post("/reviews", json={"product_id": MISSING_ID, "user_id": user.id, "rating": 4})
    assert r.status_code == 400
    assert "product_id" in r.json()["detail"]
    assert db_session.query(Review).count() == 0


def test_update_review(client, make_user, make_product, make_review, db_session):
    review = make_review(make_user(), make_product(), rating=2)
    r = client.put(f"/reviews/{review.id}", json={
        "product_id": review.product_id, "user_id": review.user_id, "rating": 4, "comment": "Good",
    })
    assert r.status_code == 200
    assert r.json()["rating"] == 4

    db_session.expire_all()
    assert db_session.get(Review, review.id).rating == 4


def test_update_review_invalid_body(client, make_user, make_product, make_review):
    review = make_review(make_user(), make_product())
    r = client.put(f"/reviews/{review.id}", json={"comment": "Good"})
    assert r.status_code == 400


def test_update_review_not_found(client, make_user, make_product):
    user, product = make_user(), make_product()
    r = client.put(f"/reviews/{MISSING_ID}", json={
        "product_id": product.id, "user_id": user.id, "rating": 4, "comment": "Good",
    })
    assert r.status_code == 404


def test_update_review_unknown_product_keeps_review(client, make_user, make_product, make_review, db_session):
    review = make_review(make_user(), make_product(), rating=2)
    r = client.put(f"/reviews/{review.id}", json={
        "product_id": MISSING_ID, "user_id": review.user_id, "rating": 4,
    })
    assert r.status_code == 400

    db_session.expire_all()
    assert db_session.get(Review, review.id).rating == 2


def test_delete_review(client, make_user, make_product, make_review, db_session):
    review = make_review(make_user(), make_product())
    r = client.delete(f"/reviews/{review.id}")
    assert r.status_code == 200
    assert db_session.query(Review).count() == 0
    assert client.delete(f"/reviews/{review.id}").status_code == 404
