"""Menu-related models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Numeric, Text, Uuid

from digital_menu.database import Base


class Category(Base):
    """Menu categories, displayed by ascending order_index"""
    __tablename__ = "categories"
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    order_index = Column(Integer, nullable=True, index=True)  # NULL sorts last (appended)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class MenuItem(Base):
    """Menu items"""
    __tablename__ = "menu_items"
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    # Plain reference, no constraint: items may outlive their category
    category_id = Column(Uuid, nullable=False, index=True)
    image_url = Column(String(500))
    tags = Column(JSON, default=list)  # ["Popular", "New", ...]
    sub_category = Column(String(100))  # Hot Drinks, Cold Drinks, etc.
    is_special_offer = Column(Boolean, default=False)
    original_price = Column(Numeric(10, 2))  # Price before the special offer
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
