"""Category endpoint tests."""

import msgpack

from conftest import MSGPACK_HEADERS, unpack_response
from resto_rate.models.category import Category


def test_categories(client, auth_headers, admin_headers, db):
    db.add(Category(name="Bakery", slug="bakery"))
    db.commit()

    forbidden = client.post("/api/categories", headers=auth_headers, json={"name": "Thai"})
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "Administrator access required"

    response = client.post(
        "/api/categories",
        content=msgpack.packb({"name": "Thai & Lao", "description": "Spicy"}),
        headers={**admin_headers, **MSGPACK_HEADERS},
    )
    assert response.status_code == 200
    assert unpack_response(response)["category"]["slug"] == "thai-lao"

    duplicate = client.post("/api/categories", headers=admin_headers, json={"name": "Thai & Lao"})
    assert duplicate.status_code == 409

    names = [c["name"] for c in unpack_response(client.get("/api/categories"))["categories"]]
    assert names == ["Bakery", "Thai & Lao"]
