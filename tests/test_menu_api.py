"""Tests for the public menu and admin menu endpoints"""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from digital_menu.services import menu_service


@pytest.mark.asyncio
async def test_public_menu_sections(client: AsyncClient, test_menu_items):
    response = await client.get("/menu")

    assert response.status_code == 200
    data = response.json()
    assert [c["name"] for c in data["categories"]] == ["Starters", "Mains", "Drinks"]
    assert [s["category"]["name"] for s in data["sections"]] == ["Starters", "Mains", "Drinks"]
    assert data["sections"][0]["items"][0]["name"] == "Bruschetta"
    assert data["error"] is None


@pytest.mark.asyncio
async def test_public_menu_category_filter(client: AsyncClient, test_menu_items, test_categories):
    drinks = test_categories[2]

    response = await client.get("/menu", params={"category": str(drinks.id)})

    data = response.json()
    assert data["selected_category"] == str(drinks.id)
    assert len(data["sections"]) == 1
    assert [i["name"] for i in data["sections"][0]["items"]] == ["Lemonade"]


@pytest.mark.asyncio
async def test_selected_category_is_default_filter(authenticated_client: AsyncClient, test_menu_items, test_categories):
    mains = test_categories[1]

    response = await authenticated_client.put(
        "/admin/menu/selection", json={"category_id": str(mains.id)}
    )
    assert response.status_code == 200

    data = (await authenticated_client.get("/menu")).json()
    assert [s["category"]["name"] for s in data["sections"]] == ["Mains"]

    await authenticated_client.put("/admin/menu/selection", json={"category_id": None})
    data = (await authenticated_client.get("/menu")).json()
    assert len(data["sections"]) == 3


@pytest.mark.asyncio
async def test_special_offers(client: AsyncClient, test_menu_items):
    response = await client.get("/menu/specials")

    assert response.status_code == 200
    offers = response.json()
    assert [o["name"] for o in offers] == ["Lasagne"]
    assert offers[0]["discount_percent"] == 25


@pytest.mark.asyncio
async def test_share_link_and_qr_code(client: AsyncClient):
    share = await client.get("/menu/share")
    assert share.json()["title"] == "Trattoria Test"
    assert share.json()["url"] == "https://menu.example.com/menu"
    assert share.json()["qr_code_url"].endswith("/menu/qr.png")

    response = await client.get("/menu/qr.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


@pytest.mark.asyncio
async def test_admin_requires_auth(client: AsyncClient):
    response = await client.post("/admin/categories", json={"name": "Soups"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_category_appends_and_refreshes(authenticated_client: AsyncClient, test_categories):
    response = await authenticated_client.post("/admin/categories", json={"name": "Soups"})

    assert response.status_code == 201
    assert response.json()["order_index"] is None

    menu = (await authenticated_client.get("/menu/categories")).json()
    assert [c["name"] for c in menu] == ["Starters", "Mains", "Drinks", "Soups"]


@pytest.mark.asyncio
async def test_update_missing_category_is_404(authenticated_client: AsyncClient):
    response = await authenticated_client.put(
        "/admin/categories/00000000-0000-0000-0000-000000000000",
        json={"name": "Ghost"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_category_leaves_items(authenticated_client: AsyncClient, test_menu_items, test_categories):
    drinks = test_categories[2]

    response = await authenticated_client.delete(f"/admin/categories/{drinks.id}")
    assert response.status_code == 204

    items = (await authenticated_client.get("/admin/menu-items")).json()
    assert "Lemonade" in [i["name"] for i in items]

    menu = (await authenticated_client.get("/menu")).json()
    assert [c["name"] for c in menu["categories"]] == ["Starters", "Mains"]


@pytest.mark.asyncio
async def test_reorder_by_positions(authenticated_client: AsyncClient, test_categories):
    starters, mains, drinks = test_categories

    response = await authenticated_client.post(
        "/admin/categories/reorder", json={"source": 2, "target": 0}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["reordered"] is True
    assert [c["id"] for c in data["categories"]] == [str(drinks.id), str(starters.id), str(mains.id)]
    assert [c["order_index"] for c in data["categories"]] == [0, 1, 2]


@pytest.mark.asyncio
async def test_reorder_same_position_is_noop(authenticated_client: AsyncClient, test_categories, monkeypatch):
    calls = []

    async def recording_reorder(db, category_ids):
        calls.append(category_ids)

    monkeypatch.setattr(menu_service, "reorder_categories", recording_reorder)

    response = await authenticated_client.post(
        "/admin/categories/reorder", json={"source": 1, "target": 1}
    )

    assert response.status_code == 200
    assert response.json()["reordered"] is False
    assert calls == []


@pytest.mark.asyncio
async def test_reorder_by_drag_ids(authenticated_client: AsyncClient, test_categories):
    starters, mains, drinks = test_categories

    response = await authenticated_client.post(
        "/admin/categories/reorder",
        json={"active_id": str(starters.id), "over_id": str(drinks.id)},
    )

    assert response.status_code == 200
    assert [c["name"] for c in response.json()["categories"]] == ["Mains", "Drinks", "Starters"]


@pytest.mark.asyncio
async def test_reorder_failure_is_reported(authenticated_client: AsyncClient, test_categories, monkeypatch):
    async def failing_reorder(db, category_ids):
        raise OperationalError("UPDATE", {}, Exception("connection lost"))

    monkeypatch.setattr(menu_service, "reorder_categories", failing_reorder)

    response = await authenticated_client.post(
        "/admin/categories/reorder", json={"source": 0, "target": 2}
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to reorder categories"


@pytest.mark.asyncio
async def test_reorder_rejects_bad_positions(authenticated_client: AsyncClient, test_categories):
    response = await authenticated_client.post(
        "/admin/categories/reorder", json={"source": 0, "target": 9}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_full_order_is_persisted(authenticated_client: AsyncClient, test_db, test_categories):
    c1, c2, c3 = test_categories

    response = await authenticated_client.put(
        "/admin/categories/order",
        json={"category_ids": [str(c3.id), str(c1.id), str(c2.id)]},
    )
    assert response.status_code == 200

    stored = await menu_service.get_categories(test_db)
    assert [c.id for c in stored] == [c3.id, c1.id, c2.id]


@pytest.mark.asyncio
async def test_full_order_with_unknown_id_changes_nothing(authenticated_client: AsyncClient, test_db, test_categories):
    c1, c2, c3 = test_categories

    response = await authenticated_client.put(
        "/admin/categories/order",
        json={"category_ids": [str(c3.id), "00000000-0000-0000-0000-000000000000"]},
    )
    assert response.status_code == 400

    stored = await menu_service.get_categories(test_db)
    assert [c.order_index for c in stored] == [0, 1, 2]


@pytest.mark.asyncio
async def test_full_order_rejects_duplicates(authenticated_client: AsyncClient, test_categories):
    c1 = test_categories[0]

    response = await authenticated_client.put(
        "/admin/categories/order",
        json={"category_ids": [str(c1.id), str(c1.id)]},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_menu_item_crud(authenticated_client: AsyncClient, test_categories):
    starters = test_categories[0]

    create = await authenticated_client.post(
        "/admin/menu-items",
        json={
            "name": "Soup of the Day",
            "description": "Ask your server",
            "price": "5.50",
            "category_id": str(starters.id),
            "tags": ["New"],
        },
    )
    assert create.status_code == 201
    item = create.json()
    assert item["is_special_offer"] is False

    menu = (await authenticated_client.get("/menu")).json()
    assert "Soup of the Day" in [i["name"] for i in menu["sections"][0]["items"]]

    by_category = await authenticated_client.get(
        "/admin/menu-items", params={"category_id": str(starters.id)}
    )
    assert [i["id"] for i in by_category.json()] == [item["id"]]

    update = await authenticated_client.put(
        f"/admin/menu-items/{item['id']}", json={"price": "4.75"}
    )
    assert update.status_code == 200
    assert float(update.json()["price"]) == 4.75

    delete = await authenticated_client.delete(f"/admin/menu-items/{item['id']}")
    assert delete.status_code == 204

    missing = await authenticated_client.get(f"/admin/menu-items/{item['id']}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_enabling_offer_defaults_original_price(authenticated_client: AsyncClient, test_menu_items):
    bruschetta = test_menu_items[0]

    first = await authenticated_client.put(
        f"/admin/menu-items/{bruschetta.id}", json={"is_special_offer": True}
    )
    assert first.status_code == 200
    assert float(first.json()["original_price"]) == 6.50

    # Lower the price, toggle again: the original price stays
    second = await authenticated_client.put(
        f"/admin/menu-items/{bruschetta.id}",
        json={"price": "5.00", "is_special_offer": True},
    )
    assert float(second.json()["original_price"]) == 6.50

    offers = (await authenticated_client.get("/menu/specials")).json()
    assert {o["name"]: o["discount_percent"] for o in offers}["Bruschetta"] == 23


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"name": None},
        {"description": None},
        {"price": None},
        {"category_id": None},
        {"is_special_offer": None},
    ],
)
async def test_menu_item_update_rejects_null_required_fields(
    authenticated_client: AsyncClient, test_menu_items, payload
):
    bruschetta = test_menu_items[0]

    response = await authenticated_client.put(f"/admin/menu-items/{bruschetta.id}", json=payload)
    assert response.status_code == 422

    stored = await authenticated_client.get(f"/admin/menu-items/{bruschetta.id}")
    assert stored.json()["name"] == "Bruschetta"
    assert float(stored.json()["price"]) == 6.50


@pytest.mark.asyncio
async def test_menu_item_update_may_clear_optional_fields(authenticated_client: AsyncClient, test_menu_items):
    lemonade = test_menu_items[2]

    response = await authenticated_client.put(
        f"/admin/menu-items/{lemonade.id}", json={"sub_category": None}
    )

    assert response.status_code == 200
    assert response.json()["sub_category"] is None


@pytest.mark.asyncio
async def test_category_update_rejects_null_name(authenticated_client: AsyncClient, test_categories):
    starters = test_categories[0]

    response = await authenticated_client.put(
        f"/admin/categories/{starters.id}", json={"name": None}
    )
    assert response.status_code == 422

    names = [c["name"] for c in (await authenticated_client.get("/admin/categories")).json()]
    assert names == ["Starters", "Mains", "Drinks"]
