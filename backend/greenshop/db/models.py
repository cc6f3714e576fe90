"""
SQLAlchemy ORM Models for GreenShop

Two relations: users (keyed by the identity provider's user id) and
purchases (many per user).
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the format stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserModel(Base):
    """
    ORM model for users table.

    id is the opaque identifier issued by Clerk. email is nullable at the
    column level but always written by record_purchase.
    """
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class PurchaseModel(Base):
    """
    ORM model for purchases table.

    No uniqueness on (user_id, product_code): a user may buy the same product
    more than once.
    """
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    product_code = Column(String, nullable=False)
    product_name = Column(String)
    price = Column(Float)
    image_url = Column(String)
    purchased_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    __table_args__ = (
        Index("idx_purchases_user_product", "user_id", "product_code"),
    )
