"""
Product API tests: listing, detail, CRUD with ownership, likes, seller
dashboard and image upload.
"""

import cloudinary.uploader
import pytest

from models.product import ProductModel


class TestListProducts:
    def test_envelope_and_pagination(self, client, register, create_product):
        seller = register()
        for i in range(3):
            create_product(seller["headers"], name=f"Item {i}")

        resp = client.get("/api/products", params={"limit": 2})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert len(body["data"]) == 2
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        assert {"favoriteCount", "isFavorite", "likes", "likedBy"} <= set(body["data"][0])

    def test_category_price_and_page(self, client, register, create_product):
        seller = register()
        for price in (50, 60, 70, 80, 100):
            create_product(seller["headers"], name=f"Shoe {price}", category="Shoes", price=price)
        create_product(seller["headers"], name="Cheap shoe", category="Shoes", price=20)
        create_product(seller["headers"], name="Bag", category="Bags", price=75)

        resp = client.get("/api/products?category=Shoes&minPrice=50&maxPrice=100&page=2&limit=2")
        body = resp.json()
        assert resp.status_code == 200
        assert len(body["data"]) == 2
        assert body["pagination"]["total"] == 5
        assert body["pagination"]["pages"] == 3

    def test_search_and_sort(self, client, register, create_product):
        seller = register()
        create_product(seller["headers"], name="Red Dress", price=80, tags="summer, party")
        create_product(seller["headers"], name="Blue Jeans", price=40, tags=["denim"])
        create_product(seller["headers"], name="Red Scarf", price=15)

        resp = client.get("/api/products", params={"search": "red", "sortBy": "price", "sortOrder": "asc"})
        assert [p["name"] for p in resp.json()["data"]] == ["Red Scarf", "Red Dress"]

        resp = client.get("/api/products", params={"search": "PARTY"})
        assert [p["name"] for p in resp.json()["data"]] == ["Red Dress"]

    def test_featured_false_filter(self, client, register, create_product):
        seller = register()
        create_product(seller["headers"], name="Star", featured=True)
        create_product(seller["headers"], name="Plain")

        resp = client.get("/api/products", params={"featured": "false"})
        assert [p["name"] for p in resp.json()["data"]] == ["Plain"]

    @pytest.mark.parametrize("query", [
        "page=abc", "page=0", "limit=-3", "minPrice=lots", "sortBy=secret",
        "author=100000000000000000000", "page=100000000000000000",
    ])
    def test_invalid_parameters(self, client, query):
        resp = client.get(f"/api/products?{query}")
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Invalid parameter"
        assert body["errors"]

    def test_unknown_category_is_not_an_error(self, client, register, create_product):
        create_product(register()["headers"])
        resp = client.get("/api/products", params={"category": "Spaceships"})
        assert resp.status_code == 200
        assert resp.json()["data"] == []

    def test_invalid_token_degrades_to_anonymous(self, client, register, create_product):
        create_product(register()["headers"])
        resp = client.get("/api/products", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 200
        assert resp.json()["data"][0]["isFavorite"] is False


class TestProductDetail:
    def test_favorite_status_for_anonymous_and_owner(self, client, register, create_product):
        user_a = register()
        product = create_product(user_a["headers"], name="Test Item", price=10, category="Clothing", stock=5)

        anonymous = client.get(f"/api/products/{product['id']}").json()["data"]
        assert anonymous["favoriteCount"] == 0
        assert anonymous["isFavorite"] is False

        client.post("/api/favorites", json={"productId": product["id"]}, headers=user_a["headers"])

        detail = client.get(f"/api/products/{product['id']}", headers=user_a["headers"]).json()["data"]
        assert detail["favoriteCount"] == 1
        assert detail["isFavorite"] is True

        anonymous = client.get(f"/api/products/{product['id']}").json()["data"]
        assert anonymous["favoriteCount"] == 1
        assert anonymous["isFavorite"] is False

    def test_malformed_id_is_400(self, client):
        resp = client.get("/api/products/not-an-id")
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Invalid product ID format"}

    def test_id_beyond_integer_column_is_400(self, client):
        resp = client.get("/api/products/9223372036854775808")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid product ID format"

    def test_search_for_json_punctuation_finds_nothing(self, client, register, create_product):
        seller = register()
        create_product(seller["headers"], name="Jeans", tags=["denim"])

        resp = client.get("/api/products", params={"search": "["})
        assert resp.status_code == 200
        assert resp.json()["pagination"]["total"] == 0

    def test_missing_product_is_404(self, client):
        resp = client.get("/api/products/9999")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Product not found"

    def test_views_are_counted(self, client, register, create_product):
        product = create_product(register()["headers"])
        client.get(f"/api/products/{product['id']}")
        detail = client.get(f"/api/products/{product['id']}").json()["data"]
        assert detail["views"] == 2


class TestCreateProduct:
    def test_create(self, client, register):
        seller = register()
        resp = client.post("/api/products", headers=seller["headers"], json={
            "name": "  Linen Shirt ",
            "description": "Breathable linen shirt for summer",
            "price": 49.9,
            "category": "Clothing",
            "stock": 3,
            "tags": "linen, summer, ",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Product created successfully"
        data = body["data"]
        assert data["name"] == "Linen Shirt"
        assert data["tags"] == ["linen", "summer"]
        assert data["status"] == "active"
        assert data["authorId"] == seller["id"]
        assert data["author"]["name"] == "Test User"
        assert data["likes"] == 0
        assert data["stockStatus"] == "low_stock"
        assert data["isAvailable"] is True
        assert data["image"].startswith("https://")

    def test_requires_authentication(self, client):
        resp = client.post("/api/products", json={"name": "x"})
        assert resp.status_code == 401
        assert resp.json()["success"] is False

    def test_validation_errors_are_field_level(self, client, register):
        seller = register()
        resp = client.post("/api/products", headers=seller["headers"], json={
            "name": "X",
            "description": "short",
            "price": -1,
            "category": "Spaceships",
            "stock": 1.5,
        })
        assert resp.status_code == 400
        body = resp.json()
        assert body["message"] == "Validation failed"
        fields = {error["field"] for error in body["errors"]}
        assert {"name", "description", "price", "category", "stock"} <= fields


class TestUpdateAndDelete:
    def test_owner_can_update(self, client, register, create_product):
        owner = register()
        product = create_product(owner["headers"])

        resp = client.put(f"/api/products/{product['id']}", headers=owner["headers"], json={"price": 12.5, "stock": 0})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["price"] == 12.5
        assert data["stock"] == 0
        assert data["name"] == product["name"]
        assert data["stockStatus"] == "out_of_stock"
        assert data["isAvailable"] is False

    def test_non_owner_is_forbidden(self, client, register, create_product):
        owner, intruder = register(), register()
        product = create_product(owner["headers"])

        resp = client.put(f"/api/products/{product['id']}", headers=intruder["headers"], json={"price": 1})
        assert resp.status_code == 403
        assert resp.json()["message"] == "Not authorized to update this product"

        resp = client.delete(f"/api/products/{product['id']}", headers=intruder["headers"])
        assert resp.status_code == 403

        assert client.get(f"/api/products/{product['id']}").json()["data"]["price"] == product["price"]

    def test_anonymous_mutation_is_unauthorized(self, client, register, create_product):
        product = create_product(register()["headers"])
        assert client.put(f"/api/products/{product['id']}", json={"price": 1}).status_code == 401
        assert client.delete(f"/api/products/{product['id']}").status_code == 401

    def test_update_rejects_bad_category(self, client, register, create_product):
        owner = register()
        product = create_product(owner["headers"])
        resp = client.put(f"/api/products/{product['id']}", headers=owner["headers"], json={"category": "Boats"})
        assert resp.status_code == 400

    def test_owner_can_delete(self, client, register, create_product):
        owner = register()
        product = create_product(owner["headers"])

        resp = client.delete(f"/api/products/{product['id']}", headers=owner["headers"])
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Product deleted successfully"}
        assert client.get(f"/api/products/{product['id']}").status_code == 404

    def test_delete_missing_and_malformed(self, client, register):
        owner = register()
        assert client.delete("/api/products/4242", headers=owner["headers"]).status_code == 404
        assert client.delete("/api/products/abc", headers=owner["headers"]).status_code == 400


class TestLikes:
    def test_toggle_twice_restores_count(self, client, register, create_product):
        owner, fan = register(), register()
        product = create_product(owner["headers"])

        first = client.post(f"/api/products/{product['id']}/like", headers=fan["headers"]).json()["data"]
        assert first == {"likes": 1, "isLiked": True}
        detail = client.get(f"/api/products/{product['id']}").json()["data"]
        assert detail["likedBy"] == [fan["id"]]

        second = client.post(f"/api/products/{product['id']}/like", headers=fan["headers"]).json()["data"]
        assert second == {"likes": 0, "isLiked": False}
        detail = client.get(f"/api/products/{product['id']}").json()["data"]
        assert detail["likedBy"] == []
        assert detail["likes"] == 0

    def test_likes_do_not_touch_favorites(self, client, register, create_product):
        owner, fan = register(), register()
        product = create_product(owner["headers"])

        client.post(f"/api/products/{product['id']}/like", headers=fan["headers"])
        detail = client.get(f"/api/products/{product['id']}", headers=fan["headers"]).json()["data"]
        assert detail["likes"] == 1
        assert detail["favoriteCount"] == 0
        assert detail["isFavorite"] is False


class TestSellerViews:
    def test_my_products(self, client, register, create_product):
        seller, other = register(), register()
        create_product(seller["headers"], name="Live")
        create_product(seller["headers"], name="Draft", status="draft")
        create_product(other["headers"], name="Someone else")

        body = client.get("/api/products/my-products", headers=seller["headers"]).json()
        assert {p["name"] for p in body["data"]} == {"Live", "Draft"}
        assert body["pagination"]["total"] == 2

        body = client.get("/api/products/my-products", params={"status": "draft"}, headers=seller["headers"]).json()
        assert [p["name"] for p in body["data"]] == ["Draft"]

    def test_huge_page_is_invalid_parameter(self, client, register):
        seller = register()
        resp = client.get(
            "/api/products/my-products", params={"page": str(10**17)}, headers=seller["headers"],
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid parameter"

    def test_my_products_requires_auth(self, client):
        assert client.get("/api/products/my-products").status_code == 401

    def test_dashboard_stats(self, client, register, create_product, db_session):
        seller, fan = register(), register()
        first = create_product(seller["headers"], price=10)
        create_product(seller["headers"], price=30, status="inactive")

        product = db_session.get(ProductModel, first["id"])
        product.sales = 4
        db_session.commit()

        client.post("/api/favorites", json={"productId": first["id"]}, headers=fan["headers"])
        client.post(f"/api/products/{first['id']}/like", headers=fan["headers"])

        resp = client.get("/api/products/dashboard/stats", headers=seller["headers"])
        assert resp.status_code == 200
        assert resp.json()["data"] == {
            "totalProducts": 2,
            "activeProducts": 1,
            "totalSales": 4,
            "totalRevenue": 40.0,
            "totalLikes": 1,
            "totalFavorites": 1,
        }


class TestImageUpload:
    def test_upload(self, client, register, monkeypatch):
        calls = {}

        def fake_upload(file, **options):
            calls.update(options)
            return {"secure_url": "https://res.cloudinary.com/demo/image/upload/shirt.png"}

        monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
        seller = register()

        resp = client.post(
            "/api/products/upload-image",
            headers=seller["headers"],
            files={"file": ("shirt.png", b"\x89PNG\r\n\x1a\n", "image/png")},
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["url"].endswith("shirt.png")
        assert calls["folder"] == "dressify/products"

    def test_rejects_non_images(self, client, register):
        seller = register()
        resp = client.post(
            "/api/products/upload-image",
            headers=seller["headers"],
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Only image files are allowed"
