"""
Tests for the order endpoints.
"""

from unittest.mock import MagicMock

import pytest

from shared.config.settings import settings


def line(menu_item_id="m1", name="Paneer", variant="full", price="200", qty=1):
    return {"menu_item_id": menu_item_id, "name": name, "variant": variant, "price": price, "qty": qty}


def place(client, headers, items=None, **extra):
    body = {"items": items if items is not None else [line()], **extra}
    return client.post("/api/orders", json=body, headers=headers)


class TestPlaceOrder:

    def test_place_order(self, client, auth_headers):
        response = place(
            client,
            auth_headers,
            [line(qty=2), line("m2", "Naan", "half", "30", 1)],
            table="5",
        )
        assert response.status_code == 201
        data = response.json()
        assert data["order_number"] == 1
        assert data["status"] == "pending"
        assert data["payment"] == "pending"
        assert data["table"] == "5"
        assert data["total"] == "430"
        assert {i["key"] for i in data["items"]} == {"m1_full", "m2_half"}

    def test_repeated_lines_merge(self, client, auth_headers):
        data = place(client, auth_headers, [line(qty=1), line(qty=2)]).json()
        assert len(data["items"]) == 1
        assert data["items"][0]["qty"] == 3
        assert data["total"] == "600"

    def test_numbers_increase(self, client, auth_headers):
        numbers = [place(client, auth_headers).json()["order_number"] for _ in range(3)]
        assert numbers == [1, 2, 3]

    def test_empty_cart(self, client, auth_headers):
        response = place(client, auth_headers, [])
        assert response.status_code == 400
        assert response.json()["detail"] == "No items selected"

    def test_unknown_payment(self, client, auth_headers):
        assert place(client, auth_headers, payment="card").status_code == 400

    def test_invalid_line(self, client, auth_headers):
        assert place(client, auth_headers, [line(variant="quarter")]).status_code == 422
        assert place(client, auth_headers, [line(qty=0)]).status_code == 422

    def test_requires_auth(self, client):
        assert place(client, {}).status_code == 401

    def test_event_published_when_enabled(self, client, auth_headers, monkeypatch):
        published = MagicMock()

        async def fake_publish(*args, **kwargs):
            published(*args, **kwargs)

        monkeypatch.setattr("rest_api.routers.owner._base.publish_order_event", fake_publish)
        data = place(client, auth_headers).json()

        published.assert_called_once()
        event_type, restaurant_id, order_id, entity, actor = published.call_args.args
        assert event_type == "ORDER_CREATED"
        assert restaurant_id == "owner-0001"
        assert order_id == data["id"]
        assert entity["order_number"] == 1


class TestOrderUpdates:

    @pytest.fixture
    def order(self, client, auth_headers):
        return place(client, auth_headers).json()

    def test_get_order(self, client, auth_headers, order):
        response = client.get(f"/api/orders/{order['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == order["id"]

    def test_get_missing(self, client, auth_headers):
        assert client.get("/api/orders/gone", headers=auth_headers).status_code == 404

    def test_advance(self, client, auth_headers, order):
        statuses = [
            client.post(f"/api/orders/{order['id']}/advance", headers=auth_headers).json()["status"]
            for _ in range(4)
        ]
        assert statuses == ["preparing", "ready", "completed", "completed"]

    def test_set_status(self, client, auth_headers, order):
        response = client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "ready"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_set_unknown_status(self, client, auth_headers, order):
        response = client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "lost"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_set_payment(self, client, auth_headers, order):
        response = client.patch(
            f"/api/orders/{order['id']}/payment", json={"payment": "completed"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["payment"] == "completed"
        assert response.json()["status"] == "pending"

    def test_add_items(self, client, auth_headers, order):
        response = client.post(
            f"/api/orders/{order['id']}/items",
            json={"items": [line(price="999", qty=1), line("m3", "Lassi", "full", "60", 2)]},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["order_number"] == order["order_number"]
        paneer = next(i for i in data["items"] if i["key"] == "m1_full")
        assert paneer["qty"] == 2
        assert paneer["price"] == "200"
        assert data["total"] == "520"

    def test_cancel(self, client, auth_headers, order):
        response = client.delete(f"/api/orders/{order['id']}", headers=auth_headers)
        assert response.status_code == 400

        response = client.delete(f"/api/orders/{order['id']}?confirm=true", headers=auth_headers)
        assert response.status_code == 204
        assert client.get(f"/api/orders/{order['id']}", headers=auth_headers).status_code == 404


class TestOrderHistory:

    def test_filters_and_search(self, client, auth_headers):
        first = place(client, auth_headers).json()
        second = place(client, auth_headers, [line(price="75")]).json()
        place(client, auth_headers)
        client.patch(
            f"/api/orders/{first['id']}/payment", json={"payment": "completed"}, headers=auth_headers
        )
        client.patch(
            f"/api/orders/{second['id']}/status", json={"status": "completed"}, headers=auth_headers
        )

        def numbers(query):
            response = client.get(f"/api/orders{query}", headers=auth_headers)
            assert response.status_code == 200
            return [o["order_number"] for o in response.json()]

        assert numbers("") == [3, 2, 1]
        assert numbers("?filter=paid") == [1]
        assert numbers("?filter=completed") == [2]
        assert numbers("?filter=pending") == [3, 1]
        assert numbers("?search=75") == [2]

    def test_unknown_filter(self, client, auth_headers):
        assert client.get("/api/orders?filter=refunded", headers=auth_headers).status_code == 400

    def test_owners_do_not_see_each_other(self, client, auth_headers):
        from shared.security.auth import issue_owner_token

        place(client, auth_headers)
        other = {"Authorization": f"Bearer {issue_owner_token('owner-0002', email='sam@example.com')}"}
        assert client.get("/api/orders", headers=other).json() == []
        assert place(client, other).json()["order_number"] == 1


def test_events_disabled_in_tests():
    assert settings.events_enabled is False
