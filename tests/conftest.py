"""Test configuration and fixtures"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from digital_menu.api.auth import create_access_token
from digital_menu.config import Settings
from digital_menu.main import create_app
from digital_menu.models.menu import Category, MenuItem
from digital_menu.runtime import start_runtime, stop_runtime
from digital_menu.services import auth_service


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file"""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'menu.db'}",
        create_tables_on_startup=True,
        public_menu_url="https://menu.example.com/menu",
        log_format="console",
        restaurant_name="Trattoria Test",
    )


@pytest.fixture
async def runtime(test_settings):
    """Started application services: store, change feed, menu store"""
    runtime = await start_runtime(test_settings)
    yield runtime
    await stop_runtime(runtime)


@pytest.fixture
async def test_db(runtime):
    """Session from the running application's session factory"""
    async with runtime.session_factory() as session:
        yield session


@pytest.fixture
async def test_categories(test_db, runtime):
    """Create three ordered categories"""
    base = datetime(2024, 1, 1, 12, 0, 0)
    categories = [
        Category(name="Starters", order_index=0, created_at=base),
        Category(name="Mains", order_index=1, created_at=base + timedelta(seconds=1)),
        Category(name="Drinks", order_index=2, created_at=base + timedelta(seconds=2)),
    ]
    test_db.add_all(categories)
    await test_db.commit()
    await runtime.menu_store.wait_for_refreshes()
    return categories


@pytest.fixture
async def test_menu_items(test_db, runtime, test_categories):
    """Create menu items, one of them a special offer"""
    starters, mains, drinks = test_categories
    base = datetime(2024, 1, 2, 12, 0, 0)
    items = [
        MenuItem(
            name="Bruschetta",
            description="Tomato and basil on toasted bread",
            price=Decimal("6.50"),
            category_id=starters.id,
            tags=["Popular"],
            created_at=base,
        ),
        MenuItem(
            name="Lasagne",
            description="Beef ragu, bechamel",
            price=Decimal("75.00"),
            category_id=mains.id,
            is_special_offer=True,
            original_price=Decimal("100.00"),
            created_at=base + timedelta(seconds=1),
        ),
        MenuItem(
            name="Lemonade",
            description="Freshly squeezed",
            price=Decimal("3.00"),
            category_id=drinks.id,
            sub_category="Cold Drinks",
            created_at=base + timedelta(seconds=2),
        ),
    ]
    test_db.add_all(items)
    await test_db.commit()
    await runtime.menu_store.wait_for_refreshes()
    return items


@pytest.fixture
async def test_user(test_db):
    """Create a dashboard user"""
    return await auth_service.sign_up(test_db, "admin@example.com", "adminpass123")


@pytest.fixture
async def client(test_settings, runtime):
    """Test client bound to the started runtime"""
    app = create_app(test_settings)
    app.state.runtime = runtime
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def authenticated_client(client, test_user, test_settings):
    """Create authenticated test client"""
    token = create_access_token(test_user, test_settings)
    client.headers["Authorization"] = f"Bearer {token}"
    
    return client
