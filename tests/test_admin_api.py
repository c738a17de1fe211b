"""Integration tests for the admin API via TestClient."""

from conftest import create_category, create_company, create_product, sign_up


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "operational"
        assert body["kv_store"] == "healthy"


class TestAuthEndpoints:
    def test_sign_up_returns_token(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"email": "owner@tacos.mx", "password": "secret123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["access_token"]
        assert body["email"] == "owner@tacos.mx"

    def test_duplicate_sign_up(self, client):
        sign_up(client)
        response = client.post(
            "/api/auth/signup",
            json={"email": "owner@tacos.mx", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "User already registered", "field": None}

    def test_short_password(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"email": "owner@tacos.mx", "password": "123"},
        )
        assert response.status_code == 400

    def test_sign_in_and_out(self, client):
        sign_up(client)
        response = client.post(
            "/api/auth/signin",
            json={"email": "owner@tacos.mx", "password": "secret123"},
        )
        assert response.status_code == 200
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
        assert client.get("/api/admin/me", headers=headers).status_code == 200

        assert client.post("/api/auth/signout", headers=headers).status_code == 200
        assert client.get("/api/admin/me", headers=headers).status_code == 401

    def test_bad_credentials(self, client):
        sign_up(client)
        response = client.post(
            "/api/auth/signin",
            json={"email": "owner@tacos.mx", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid login credentials"

    def test_admin_requires_token(self, client):
        response = client.get("/api/admin/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

        response = client.get("/api/admin/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestCompanyEndpoints:
    def test_operations_need_a_company_first(self, client, owner):
        response = client.get("/api/admin/categories", headers=owner)

        assert response.status_code == 400
        assert response.json()["field"] == "company"
        assert "Configuración" in response.json()["error"]

    def test_create_company_derives_slug(self, client, owner):
        company = create_company(client, owner, name="Café Olé")

        assert company["slug"] == "cafe-ole"
        assert company["menu_url"] == "http://testserver/menu/cafe-ole"

        me = client.get("/api/admin/me", headers=owner).json()
        assert me["company_id"] == company["id"]
        assert me["company_slug"] == "cafe-ole"

    def test_second_company_for_same_user(self, client, owner):
        create_company(client, owner)
        response = client.post("/api/admin/company", json={"name": "Otra"}, headers=owner)
        assert response.status_code == 409

    def test_slug_conflict(self, client, owner):
        create_company(client, owner)
        other = sign_up(client, email="other@pizza.mx")

        response = client.post(
            "/api/admin/company",
            json={"name": "Pizza", "slug": "Tacos Don Pepe"},
            headers=other,
        )

        assert response.status_code == 409
        assert response.json()["field"] == "slug"

    def test_update_settings(self, client, owner):
        create_company(client, owner)

        response = client.put(
            "/api/admin/company/settings",
            json={"name": "Tacos Pepe", "slug": "tacos-pepe", "whatsapp": "5215550000"},
            headers=owner,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["slug"] == "tacos-pepe"
        assert body["whatsapp"] == "5215550000"
        assert client.get("/api/menu/tacos-pepe").status_code == 200
        assert client.get("/api/menu/tacos-don-pepe").status_code == 404

    def test_update_profile_normalizes_color(self, client, owner):
        create_company(client, owner)

        response = client.put(
            "/api/admin/company/profile",
            json={"phone": "555-1234", "primary_color": "FF6B35", "lat": 19.43, "lng": -99.13},
            headers=owner,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["primary_color"] == "#FF6B35"
        assert body["phone"] == "555-1234"
        assert body["name"] == "Tacos Don Pepe"

    def test_upload_logo(self, client, owner):
        company = create_company(client, owner)

        response = client.put(
            "/api/admin/company/logo?filename=mi-logo.PNG",
            content=b"\x89PNG fake image",
            headers={**owner, "Content-Type": "image/png"},
        )

        assert response.status_code == 200
        logo = response.json()["logo"]
        prefix = f"http://testserver/static/uploads/company-logos/{company['id']}/logo-"
        assert logo.startswith(prefix)
        assert logo.endswith(".png")

        served = client.get(logo.replace("http://testserver", ""))
        assert served.status_code == 200
        assert served.content == b"\x89PNG fake image"

    def test_logo_must_be_an_image(self, client, owner):
        create_company(client, owner)

        response = client.put(
            "/api/admin/company/logo",
            content=b"hello",
            headers={**owner, "Content-Type": "text/plain"},
        )

        assert response.status_code == 400
        assert response.json()["field"] == "logo"


class TestCategoryEndpoints:
    def test_created_categories_are_appended(self, client, owner):
        create_company(client, owner)
        for name in ("Tacos", "Bebidas", "Postres"):
            create_category(client, owner, name)

        body = client.get("/api/admin/categories", headers=owner).json()

        assert body["total"] == 3
        assert [(c["name"], c["display_order"]) for c in body["categories"]] == [
            ("Tacos", 0), ("Bebidas", 1), ("Postres", 2),
        ]

    def test_delete_resequences_and_uncategorizes_products(self, client, owner):
        create_company(client, owner)
        create_category(client, owner, "Tacos")
        drinks = create_category(client, owner, "Bebidas")
        create_category(client, owner, "Postres")
        product_id = create_product(client, owner, "Agua", 1.0, drinks)

        response = client.delete(f"/api/admin/categories/{drinks}", headers=owner)

        assert response.status_code == 200
        assert [(c["name"], c["display_order"]) for c in response.json()["categories"]] == [
            ("Tacos", 0), ("Postres", 1),
        ]
        products = client.get("/api/admin/products", headers=owner).json()["products"]
        assert next(p for p in products if p["id"] == product_id)["category_id"] is None

        # Appending after a delete reuses the freed slot
        create_category(client, owner, "Extras")
        orders = [c["display_order"] for c in client.get("/api/admin/categories", headers=owner).json()["categories"]]
        assert orders == [0, 1, 2]

    def test_reorder(self, client, owner):
        create_company(client, owner)
        a = create_category(client, owner, "A")
        b = create_category(client, owner, "B")
        c = create_category(client, owner, "C")

        response = client.post(
            "/api/admin/categories/reorder",
            json={"category_ids": [c, a, b]},
            headers=owner,
        )

        assert response.status_code == 200
        assert [x["name"] for x in response.json()["categories"]] == ["C", "A", "B"]

        response = client.post(
            "/api/admin/categories/reorder",
            json={"category_ids": [c, a]},
            headers=owner,
        )
        assert response.status_code == 400

    def test_update_category(self, client, owner):
        create_company(client, owner)
        tacos = create_category(client, owner, "Tacos")

        response = client.put(
            f"/api/admin/categories/{tacos}",
            json={"name": "Tacos de la casa", "description": "Con tortilla hecha a mano"},
            headers=owner,
        )

        assert response.status_code == 200
        category = response.json()["categories"][0]
        assert category["name"] == "Tacos de la casa"
        assert category["display_order"] == 0

    def test_unknown_category(self, client, owner):
        create_company(client, owner)
        response = client.delete("/api/admin/categories/missing", headers=owner)
        assert response.status_code == 404


class TestProductEndpoints:
    def test_create_update_delete(self, client, owner):
        create_company(client, owner)
        tacos = create_category(client, owner, "Tacos")
        product_id = create_product(client, owner, "Taco", 2.5, tacos)

        response = client.put(
            f"/api/admin/products/{product_id}",
            json={"name": "Taco al pastor", "price": 3, "category_id": tacos, "status": "inactive"},
            headers=owner,
        )
        assert response.status_code == 200
        product = response.json()["products"][0]
        assert product["name"] == "Taco al pastor"
        assert product["price"] == 3
        assert product["status"] == "inactive"

        response = client.delete(f"/api/admin/products/{product_id}", headers=owner)
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_negative_price_rejected(self, client, owner):
        create_company(client, owner)
        response = client.post(
            "/api/admin/products",
            json={"name": "Taco", "price": -1},
            headers=owner,
        )
        assert response.status_code == 422

    def test_category_of_another_company_rejected(self, client, owner):
        create_company(client, owner)
        other = sign_up(client, email="other@pizza.mx")
        create_company(client, other, name="Pizza")
        foreign = create_category(client, other, "Pizzas")

        response = client.post(
            "/api/admin/products",
            json={"name": "Taco", "price": 2, "category_id": foreign},
            headers=owner,
        )

        assert response.status_code == 404

    def test_products_are_isolated_per_company(self, client, owner):
        create_company(client, owner)
        product_id = create_product(client, owner, "Taco", 2.5)
        other = sign_up(client, email="other@pizza.mx")
        create_company(client, other, name="Pizza")

        assert client.get("/api/admin/products", headers=other).json()["total"] == 0
        response = client.delete(f"/api/admin/products/{product_id}", headers=other)
        assert response.status_code == 404
