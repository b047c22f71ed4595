import logging
from celery import shared_task
from sqlalchemy.exc import SQLAlchemyError
from models import db
from models.order import Order
from models.user import UserProfile

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_order_receipt_task(self, order_id: int) -> bool:
    """Log an order receipt for the customer instead of emailing it."""
    try:
        order = db.session.get(Order, order_id)
        customer = db.session.get(UserProfile, order.customer_id) if order else None
    except SQLAlchemyError as exc:
        logger.error("Receipt lookup for order %s failed: %s", order_id, exc)
        db.session.rollback()
        raise self.retry(exc=exc)

    if not order:
        logger.warning("Receipt skipped, order %s not found", order_id)
        return False
    logger.info({
        "event": "order_receipt",
        "order_id": order.id,
        "email": customer.email if customer else None,
        "total_amount": str(order.total_amount),
        "items": len(order.lines),
    })
    return True
