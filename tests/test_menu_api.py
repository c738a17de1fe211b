"""Integration tests for the public menu, cart and checkout endpoints."""

import asyncio
from urllib.parse import unquote

from conftest import SLUG, create_company, create_product, sign_up
from menudigital.services.kv import get_kv_store
from menudigital.services.kv.memory import MemoryKeyValueStore

API = f"/api/menu/{SLUG}"


def _add(client, product_id, slug=SLUG):
    response = client.post(f"/api/menu/{slug}/cart/items", json={"product_id": product_id})
    assert response.status_code == 200, response.text
    return response.json()


def _checkout(client, **details):
    response = client.post(f"{API}/checkout")
    assert response.status_code == 200, response.text
    return client.post(f"{API}/checkout/submit", json=details)


class TestPublicMenu:
    def test_unknown_slug_page(self, client):
        response = client.get("/menu/no-existe")

        assert response.status_code == 404
        assert "Menú no encontrado" in response.text
        assert "El restaurante que buscas no existe." in response.text

    def test_unknown_slug_api(self, client):
        response = client.get("/api/menu/no-existe")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_menu_groups_active_products_by_category(self, client, restaurant):
        body = client.get(API).json()

        assert body["company"]["name"] == "Tacos Don Pepe"
        assert body["company"]["accepts_orders"] is True
        # Sorted by name; "Postres" has no products and uncategorized "Salsa" is left out
        assert [c["name"] for c in body["categories"]] == ["Bebidas", "Tacos"]
        assert [p["name"] for p in body["categories"][0]["products"]] == ["Agua"]
        assert {p["name"] for p in body["categories"][1]["products"]} == {"Taco", "Gringa"}

    def test_menu_page_renders(self, client, restaurant):
        response = client.get(f"/menu/{SLUG}")

        assert response.status_code == 200
        assert "Tacos Don Pepe" in response.text
        assert "Gringa" in response.text
        assert "Refresco" not in response.text

    def test_theme_color(self, client, owner, restaurant):
        client.put("/api/admin/company/profile", json={"primary_color": "00AA00"}, headers=owner)

        assert client.get(API).json()["company"]["theme_color"] == "#00AA00"


class TestCartEndpoints:
    def test_add_item_twice(self, client, restaurant):
        _add(client, restaurant["Taco"])
        body = _add(client, restaurant["Taco"])

        assert body["notice"] == "Agregado al carrito"
        assert body["count"] == 2
        assert body["items"][0]["quantity"] == 2
        assert body["items"][0]["line_total"] == 5.0
        assert body["total"] == 5.0

    def test_inactive_product_cannot_be_added(self, client, restaurant):
        response = client.post(f"{API}/cart/items", json={"product_id": restaurant["Refresco"]})
        assert response.status_code == 404

    def test_update_quantity_and_remove(self, client, restaurant):
        _add(client, restaurant["Taco"])
        _add(client, restaurant["Agua"])

        body = client.patch(f"{API}/cart/items/{restaurant['Taco']}", json={"delta": 2}).json()
        assert body["count"] == 4

        body = client.patch(f"{API}/cart/items/{restaurant['Taco']}", json={"delta": -5}).json()
        assert [i["name"] for i in body["items"]] == ["Agua"]

        body = client.delete(f"{API}/cart/items/{restaurant['Agua']}").json()
        assert body["items"] == []
        assert body["total"] == 0

    def test_cart_survives_requests(self, client, restaurant):
        _add(client, restaurant["Gringa"])

        body = client.get(f"{API}/cart").json()
        assert body["count"] == 1
        assert body["step"] == "cart"

    def test_cart_is_private_to_the_shopper(self, client, restaurant):
        _add(client, restaurant["Gringa"])
        client.cookies.clear()

        assert client.get(f"{API}/cart").json()["count"] == 0

    def test_cart_is_scoped_per_restaurant(self, client, restaurant):
        _add(client, restaurant["Gringa"])
        other = sign_up(client, email="other@pizza.mx")
        create_company(client, other, name="Pizza")
        create_product(client, other, "Pizza", 10)

        assert client.get("/api/menu/pizza/cart").json()["count"] == 0
        assert client.get(f"{API}/cart").json()["count"] == 1

    def test_open_cart_returns_to_review_step(self, client, restaurant):
        _add(client, restaurant["Taco"])
        client.post(f"{API}/checkout")

        body = client.post(f"{API}/cart/open").json()

        assert body["cart_open"] is True
        assert body["step"] == "cart"


class TestCheckoutEndpoints:
    def test_checkout_with_empty_cart(self, client, restaurant):
        response = client.post(f"{API}/checkout")

        assert response.status_code == 400
        assert response.json()["error"] == "Tu carrito está vacío"

    def test_back_keeps_cart(self, client, restaurant):
        _add(client, restaurant["Taco"])
        assert client.post(f"{API}/checkout").json()["step"] == "customer-info"

        body = client.post(f"{API}/checkout/back").json()

        assert body["step"] == "cart"
        assert body["count"] == 1

    def test_submit_requires_details_step(self, client, restaurant):
        _add(client, restaurant["Taco"])

        response = client.post(f"{API}/checkout/submit", json={"customer_name": "Ana"})

        assert response.status_code == 400
        assert response.json()["field"] == "step"

    def test_submit_requires_name(self, client, restaurant):
        _add(client, restaurant["Taco"])

        response = _checkout(client, customer_name="   ")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Por favor ingresa tu nombre",
            "field": "customer_name",
        }

    def test_delivery_requires_address(self, client, restaurant):
        _add(client, restaurant["Taco"])

        response = _checkout(client, customer_name="Ana", order_type="delivery")

        assert response.status_code == 400
        assert response.json()["error"] == "Por favor ingresa tu dirección"
        assert client.get(f"{API}/cart").json()["step"] == "customer-info"

    def test_submit_pickup_order(self, client, restaurant):
        for _ in range(3):
            _add(client, restaurant["Taco"])

        response = _checkout(client, customer_name="Ana", order_type="pickup", payment_method="cash")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Pedido enviado con éxito. ¡Gracias por tu compra!"
        assert body["order_message"] == (
            "Hola, quiero hacer un pedido:\n\n"
            "🏪 Restaurante: Tacos Don Pepe\n\n"
            "👤 Cliente: Ana\n"
            "📦 Tipo de pedido: Recoger en local\n"
            "💳 Pago: Efectivo\n\n"
            "🛒 Pedido:\n"
            "- Taco x3 ($7.5)\n\n"
            "Total: $7.50\n\n"
            "Gracias!"
        )
        url = body["whatsapp_url"]
        assert url.startswith("https://wa.me/521234567890?text=")
        assert unquote(url.split("?text=", 1)[1]) == body["order_message"]

        assert body["cart"]["items"] == []
        cart = client.get(f"{API}/cart").json()
        assert cart["count"] == 0
        assert cart["step"] == "cart"

    def test_submit_delivery_order(self, client, restaurant):
        _add(client, restaurant["Gringa"])
        _add(client, restaurant["Agua"])
        _add(client, restaurant["Agua"])

        response = _checkout(
            client,
            customer_name="Luis",
            order_type="delivery",
            payment_method="transfer",
            address="  Calle 5 #123, Centro ",
        )

        assert response.status_code == 200
        message = response.json()["order_message"]
        assert "🏠 Dirección: Calle 5 #123, Centro\n💳 Pago: Transferencia" in message
        assert "- Gringa x1 ($4)\n- Agua x2 ($2)" in message
        assert "Total: $6.00" in message

    def test_restaurant_without_whatsapp(self, client, owner, restaurant):
        client.put(
            "/api/admin/company/settings",
            json={"name": "Tacos Don Pepe", "whatsapp": None},
            headers=owner,
        )
        assert client.get(API).json()["company"]["accepts_orders"] is False
        _add(client, restaurant["Taco"])

        response = _checkout(client, customer_name="Ana")

        assert response.status_code == 400
        assert response.json()["field"] == "whatsapp"
        assert client.get(f"{API}/cart").json()["count"] == 1


class _LoopCheckingStore(MemoryKeyValueStore):
    """Memory store that records whether each call ran on the event loop thread."""

    def __init__(self):
        super().__init__()
        self.calls: list[tuple[str, bool]] = []

    def _record(self, operation):
        try:
            asyncio.get_running_loop()
            on_loop = True
        except RuntimeError:
            on_loop = False
        self.calls.append((operation, on_loop))

    def get(self, key):
        self._record("get")
        return super().get(key)

    def set(self, key, value, ttl=None):
        self._record("set")
        super().set(key, value, ttl=ttl)

    def delete(self, key):
        self._record("delete")
        super().delete(key)


class TestShopperStorage:
    def test_corrupt_stored_cart_is_discarded(self, client, restaurant):
        _add(client, restaurant["Taco"])
        session_id = client.cookies.get("menu_session")

        for raw in ('{"id": "x"}', "[1, 2]"):
            get_kv_store().set(f"session:{session_id}:cart-{SLUG}", raw)

            response = client.get(f"{API}/cart")

            assert response.status_code == 200
            assert response.json()["items"] == []

        assert _add(client, restaurant["Taco"])["count"] == 1

    def test_store_calls_stay_off_the_event_loop(self, client, restaurant, monkeypatch):
        store = _LoopCheckingStore()
        monkeypatch.setattr("menudigital.main.get_kv_store", lambda: store)

        _add(client, restaurant["Taco"])
        client.patch(f"{API}/cart/items/{restaurant['Taco']}", json={"delta": 1})
        client.post(f"{API}/cart/open")
        _checkout(client, customer_name="Ana")

        operations = {operation for operation, _ in store.calls}
        assert {"get", "set", "delete"} <= operations
        assert not [call for call in store.calls if call[1]]
