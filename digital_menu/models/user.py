"""User accounts for the admin dashboard"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Uuid

from digital_menu.database import Base


class User(Base):
    """Dashboard users; any signed-in user may manage the menu"""
    __tablename__ = "users"
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    
    # Authentication
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    
    # Tokens
    refresh_token = Column(String(500))
    
    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
