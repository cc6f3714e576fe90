"""
Database package for GreenShop.

Exports engine/session construction, table initialization and models.
"""
from .init_db import create_engine, create_session_factory, describe_database, initialize_database
from .models import (
    Base,
    UserModel,
    PurchaseModel,
    utcnow
)

__all__ = [
    "create_engine",
    "create_session_factory",
    "describe_database",
    "initialize_database",
    "Base",
    "UserModel",
    "PurchaseModel",
    "utcnow",
]
