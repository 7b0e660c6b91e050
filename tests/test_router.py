import json

import pytest
from fastapi.testclient import TestClient

from bookstore.catalog.controller import CatalogController
from bookstore.catalog.errors import INVALID_PRICE_MESSAGE
from bookstore.catalog.renderer import CatalogRenderer
from bookstore.main import create_app


@pytest.fixture
def client(controller):
    with TestClient(create_app(controller)) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "catalog": "ready"}


def test_page_lists_seeded_products(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text.count('class="product-item"') == 3


def test_page_search_and_sort(client):
    response = client.get("/", params={"q": "sách a", "sort": "name-asc"})
    assert response.text.count('class="product-item"') == 1
    assert "Sách A: Lập trình" in response.text


def test_form_toggle_and_submit(client, slot):
    client.post("/form/toggle")
    assert 'id="add-product-section"' in client.get("/").text

    response = client.post(
        "/products",
        data={"name": "Sách D", "price": "5000", "description": "Mới", "image_url": ""},
        follow_redirects=False,
    )
    assert response.status_code == 303

    page = client.get("/").text
    assert 'id="add-product-section"' not in page
    assert "5.000₫" in page
    assert json.loads(slot.get("products"))[0]["name"] == "Sách D"


def test_form_submit_validation_error(client):
    client.post("/form/toggle")
    response = client.post("/products", data={"name": "A", "price": "0", "description": "d"})
    assert response.status_code == 400
    assert INVALID_PRICE_MESSAGE in response.text
    assert 'id="add-product-section"' in response.text


def test_form_submit_error_shown_without_toggle(client):
    response = client.post("/products", data={"name": "A", "price": "0", "description": "d"})
    assert response.status_code == 400
    assert INVALID_PRICE_MESSAGE in response.text
    assert 'id="add-product-section"' in response.text
    assert 'value="A"' in response.text


def test_delete_confirmation_flow(client, controller):
    target = controller.store.list_items()[0]

    prompt = client.get(f"/products/{target.id}/delete")
    assert prompt.status_code == 200
    assert target.name in prompt.text

    client.post(f"/products/{target.id}/delete", data={"answer": "no"})
    assert controller.store.get(target.id) is not None

    response = client.post(
        f"/products/{target.id}/delete", data={"answer": "yes"}, follow_redirects=False
    )
    assert response.status_code == 303
    assert controller.store.get(target.id) is None


def test_delete_prompt_for_unknown_product_is_404(client):
    assert client.get("/products/999/delete").status_code == 404


def test_api_list_products(client):
    response = client.get("/api/catalog/products", params={"sort": "price-asc"})
    assert response.status_code == 200
    prices = [entry["price"] for entry in response.json()]
    assert prices == sorted(prices)
    assert {"id", "name", "price", "desc", "imgUrl"} <= set(response.json()[0])


def test_api_list_rejects_unknown_sort(client):
    assert client.get("/api/catalog/products", params={"sort": "rating"}).status_code == 422


def test_api_add_and_remove(client, controller):
    response = client.post(
        "/api/catalog/products", json={"name": "API", "price": 250, "desc": "d"}
    )
    assert response.status_code == 201
    created = response.json()
    assert created["price"] == 250
    assert created["id"] in controller.view.actions

    response = client.delete(f"/api/catalog/products/{created['id']}")
    assert response.json() == {"status": "ok", "removed": True}
    response = client.delete(f"/api/catalog/products/{created['id']}")
    assert response.json() == {"status": "ok", "removed": False}


def test_api_add_validation_error(client):
    response = client.post("/api/catalog/products", json={"name": "", "price": "100", "desc": "d"})
    assert response.status_code == 400
    assert response.json()["detail"]


def test_debug_store(client):
    data = client.get("/api/catalog/debug/store").json()
    assert data["status"] == "ready"
    assert data["count"] == 3


def test_failed_seed_page(failing_store):
    controller = CatalogController(failing_store, CatalogRenderer())
    with TestClient(create_app(controller)) as client:
        assert "Lỗi khi tải sản phẩm" in client.get("/").text
        assert client.get("/health").json()["catalog"] == "failed"
