"""
User model
Identity directory entry; authentication itself happens upstream
"""

from sqlalchemy import Column, String, Boolean, Enum
import enum

from .base import BaseModel, TimestampedModel, UUIDModel

class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"

class User(BaseModel, TimestampedModel, UUIDModel):
    """Known customer or administrator"""

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.CUSTOMER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
