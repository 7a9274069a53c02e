"""Review endpoint tests."""

import pytest

from conftest import unpack_response
from resto_rate.models.restaurant import Restaurant
from resto_rate.models.review import Review


@pytest.fixture
def restaurant_id(client, other_auth_headers):
    """A restaurant owned by bob."""
    response = client.post("/api/restaurants", headers=other_auth_headers, json={"name": "Pho 99"})
    return unpack_response(response)["restaurant"]["id"]


def post_review(client, headers, restaurant_id, **fields):
    body = {"rating": 5}
    body.update(fields)
    return client.post(f"/api/restaurants/{restaurant_id}/reviews", headers=headers, json=body)


def stats(db, restaurant_id):
    restaurant = db.get(Restaurant, restaurant_id)
    db.refresh(restaurant)
    return restaurant.average_rating, restaurant.total_reviews


def test_create_review_updates_stats(client, db, auth_headers, restaurant_id, register_user):
    response = post_review(
        client,
        auth_headers,
        restaurant_id,
        rating=4,
        title="Solid pho",
        content="Rich broth",
        visitDate="2026-10-01T19:00:00Z",
        photos=[{"url": "https://img.example.com/1.jpg", "caption": "Bowl"}],
    )

    assert response.status_code == 200
    review = unpack_response(response)["review"]
    assert review["rating"] == 4
    assert review["user"]["username"] == "alice"
    assert review["photos"][0]["url"] == "https://img.example.com/1.jpg"
    assert review["photos"][0]["orderIndex"] == 0
    assert review["helpfulCount"] == 0
    assert stats(db, restaurant_id) == (4.0, 1)

    post_review(client, register_user("carol"), restaurant_id, rating=5)
    post_review(client, register_user("dave"), restaurant_id, rating=2)
    assert stats(db, restaurant_id) == (3.67, 3)


def test_second_review_by_same_user_conflicts(client, db, auth_headers, restaurant_id):
    post_review(client, auth_headers, restaurant_id, rating=4)

    response = post_review(client, auth_headers, restaurant_id, rating=1)

    assert response.status_code == 409
    assert response.json()["error"] == "You have already reviewed this restaurant"
    assert db.query(Review).count() == 1
    assert stats(db, restaurant_id) == (4.0, 1)


@pytest.mark.parametrize("rating", [0, 6])
def test_review_rating_out_of_range(client, auth_headers, restaurant_id, rating):
    assert post_review(client, auth_headers, restaurant_id, rating=rating).status_code == 400


def test_review_requires_auth(client, restaurant_id):
    response = client.post(f"/api/restaurants/{restaurant_id}/reviews", json={"rating": 5})
    assert response.status_code == 401


def test_review_of_missing_restaurant(client, auth_headers):
    response = post_review(client, auth_headers, "01ARZ3NDEKTSV4RRFFQ69G5FAV")
    assert response.status_code == 404


def test_list_restaurant_reviews(client, auth_headers, restaurant_id, register_user):
    post_review(client, auth_headers, restaurant_id, rating=3)
    post_review(client, register_user("carol"), restaurant_id, rating=5)

    response = client.get(f"/api/restaurants/{restaurant_id}/reviews", params={"limit": 1})

    assert response.status_code == 200
    data = unpack_response(response)
    assert len(data["reviews"]) == 1
    assert data["pagination"]["total"] == 2


def test_get_review(client, auth_headers, restaurant_id):
    review = unpack_response(post_review(client, auth_headers, restaurant_id))["review"]

    response = client.get(f"/api/reviews/{review['id']}")

    assert response.status_code == 200
    data = unpack_response(response)["review"]
    assert data["id"] == review["id"]
    assert data["userHelpfulVote"] is None


def test_update_review(client, db, auth_headers, restaurant_id):
    review = unpack_response(post_review(client, auth_headers, restaurant_id, rating=5))["review"]

    response = client.put(
        f"/api/reviews/{review['id']}", headers=auth_headers, json={"rating": 2, "title": "Went downhill"}
    )

    assert response.status_code == 200
    updated = unpack_response(response)["review"]
    assert updated["rating"] == 2
    assert updated["title"] == "Went downhill"
    assert stats(db, restaurant_id) == (2.0, 1)


def test_update_review_by_other_user(client, auth_headers, other_auth_headers, restaurant_id):
    review = unpack_response(post_review(client, auth_headers, restaurant_id))["review"]

    response = client.put(
        f"/api/reviews/{review['id']}", headers=other_auth_headers, json={"rating": 1}
    )

    assert response.status_code == 403
    assert response.json()["error"] == "You can only update reviews you wrote"


def test_delete_review_recomputes_stats(client, db, auth_headers, other_auth_headers, restaurant_id):
    review = unpack_response(post_review(client, auth_headers, restaurant_id, rating=4))["review"]

    assert client.delete(f"/api/reviews/{review['id']}", headers=other_auth_headers).status_code == 403

    response = client.delete(f"/api/reviews/{review['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert client.get(f"/api/reviews/{review['id']}").status_code == 404
    assert stats(db, restaurant_id) == (0.0, 0)


def test_add_photo(client, auth_headers, other_auth_headers, restaurant_id):
    review = unpack_response(
        post_review(client, auth_headers, restaurant_id, photos=[{"url": "https://img/1.jpg"}])
    )["review"]
    url = f"/api/reviews/{review['id']}/photos"

    forbidden = client.post(url, headers=other_auth_headers, json={"url": "https://img/x.jpg"})
    assert forbidden.status_code == 403

    response = client.post(url, headers=auth_headers, json={"url": "https://img/2.jpg", "caption": "Dessert"})

    assert response.status_code == 200
    photo = unpack_response(response)["photo"]
    assert photo["orderIndex"] == 1
    assert photo["caption"] == "Dessert"
    photos = unpack_response(client.get(f"/api/reviews/{review['id']}"))["review"]["photos"]
    assert [p["url"] for p in photos] == ["https://img/1.jpg", "https://img/2.jpg"]


def test_helpful_votes(client, auth_headers, other_auth_headers, restaurant_id, register_user):
    review = unpack_response(post_review(client, auth_headers, restaurant_id))["review"]
    url = f"/api/reviews/{review['id']}/helpful"

    response = client.post(url, headers=other_auth_headers, json={"isHelpful": True})
    assert response.status_code == 200
    data = unpack_response(response)["review"]
    assert data["helpfulCount"] == 1
    assert data["userHelpfulVote"] is True

    carol = register_user("carol")
    client.post(url, headers=carol, json={"isHelpful": True})
    # Changing a vote replaces it
    response = client.post(url, headers=carol, json={"isHelpful": False})
    assert unpack_response(response)["review"]["helpfulCount"] == 1

    viewed = unpack_response(client.get(f"/api/reviews/{review['id']}", headers=carol))["review"]
    assert viewed["userHelpfulVote"] is False


def test_cannot_vote_on_own_review(client, auth_headers, restaurant_id):
    review = unpack_response(post_review(client, auth_headers, restaurant_id))["review"]

    response = client.post(
        f"/api/reviews/{review['id']}/helpful", headers=auth_headers, json={"isHelpful": True}
    )
    assert response.status_code == 403


def test_reviews_of_deleted_restaurant_are_hidden(
    client, auth_headers, other_auth_headers, restaurant_id, register_user
):
    review = unpack_response(post_review(client, auth_headers, restaurant_id))["review"]
    url = f"/api/reviews/{review['id']}"

    assert client.delete(f"/api/restaurants/{restaurant_id}", headers=other_auth_headers).status_code == 200

    assert client.get(url).status_code == 404
    assert client.put(url, headers=auth_headers, json={"rating": 1}).status_code == 404
    carol = register_user("carol")
    assert client.post(f"{url}/helpful", headers=carol, json={"isHelpful": True}).status_code == 404
