from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()


def utcnow():
    """Current UTC time as a naive datetime, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Re-export common models for convenience
from .user import UserProfile  # noqa: F401
from .product import Product  # noqa: F401
from .cart import CartLine  # noqa: F401
from .order import Order, OrderLine  # noqa: F401
