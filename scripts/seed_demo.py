#!/usr/bin/env python3
"""
Seed script to create a demo menu and an admin account
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal


DEMO_MENU = {
    "Coffee": [
        {"name": "Espresso", "description": "Double shot, house blend", "price": "2.50",
         "sub_category": "Hot Drinks", "tags": ["Popular"]},
        {"name": "Cappuccino", "description": "Espresso, steamed milk and foam", "price": "3.50",
         "sub_category": "Hot Drinks"},
        {"name": "Iced Latte", "description": "Espresso over ice with cold milk", "price": "3.00",
         "sub_category": "Cold Drinks", "is_special_offer": True, "original_price": "4.00",
         "tags": ["Special Price"]},
    ],
    "Breakfast": [
        {"name": "Pancake Stack", "description": "Three pancakes, maple syrup, berries", "price": "7.50",
         "tags": ["New"]},
        {"name": "Avocado Toast", "description": "Sourdough, smashed avocado, chili flakes", "price": "8.00"},
    ],
    "Desserts": [
        {"name": "Cheesecake", "description": "New York style, strawberry coulis", "price": "5.00",
         "is_special_offer": True, "original_price": "6.50", "tags": ["Big Offer"]},
    ],
}


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from digital_menu.config import get_settings
    from digital_menu.database import Base, create_engine, create_session_factory
    from digital_menu.models.news import NewsEventType
    from digital_menu.models.user import User
    from digital_menu.schemas.menu import CategoryCreate, MenuItemCreate
    from digital_menu.schemas.news import NewsEventCreate
    from digital_menu.services import auth_service, menu_service, news_service

    settings = get_settings()
    engine = create_engine(settings.database_url)
    SessionLocal = create_session_factory(engine)

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        existing = await menu_service.get_categories(db)
        if existing:
            print("Demo data already exists. Skipping...")
            await engine.dispose()
            return

        print("Creating demo menu...")

        item_count = 0
        for position, (category_name, items) in enumerate(DEMO_MENU.items()):
            category = await menu_service.create_category(
                db, CategoryCreate(name=category_name, order_index=position)
            )
            for item_data in items:
                data = dict(item_data)
                data["price"] = Decimal(data["price"])
                if "original_price" in data:
                    data["original_price"] = Decimal(data["original_price"])
                await menu_service.create_menu_item(
                    db, MenuItemCreate(category_id=category.id, **data)
                )
                item_count += 1

        await news_service.create_news_event(
            db,
            NewsEventCreate(
                title="Now open on Sundays",
                content="We are open every Sunday from 9am to 3pm.",
                type=NewsEventType.NEWS,
            ),
        )
        await news_service.create_news_event(
            db,
            NewsEventCreate(
                title="Live jazz night",
                content="Join us for live jazz and half-price desserts.",
                type=NewsEventType.EVENT,
                event_date=date.today() + timedelta(days=7),
            ),
        )

        result = await db.execute(select(User).where(User.email == "admin@example.com"))
        if result.scalar_one_or_none() is None:
            await auth_service.sign_up(db, "admin@example.com", "admin123")

    await engine.dispose()

    print(f"""
Demo data created successfully!

Admin:
  Email: admin@example.com
  Password: admin123

Menu: {len(DEMO_MENU)} categories, {item_count} items created
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
