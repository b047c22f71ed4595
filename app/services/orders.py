import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import OperationFailedError
from models.order import Order

logger = logging.getLogger(__name__)


def list_customer_orders(customer_id: str) -> List[Order]:
    """Order history, newest first."""
    try:
        return (
            Order.query.filter_by(customer_id=customer_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Error getting orders for %s: %s", customer_id, e)
        raise OperationFailedError("Failed to load orders. Please try again.")


def get_customer_order(customer_id: str, order_id) -> Optional[Order]:
    order = Order.query.filter_by(id=order_id).first()
    if not order or order.customer_id != customer_id:
        return None
    return order
