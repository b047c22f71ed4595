"""Checkout: turn a customer's cart into a completed order.

``build_order`` is read-only: it validates every cart line against the
current product record and prices the order at current prices.
``commit_order`` then applies three grouped writes in order:

1. insert the order and its line snapshots;
2. decrement stock for every line (rows locked, stock re-checked);
3. clear the customer's cart.

Each step commits on its own. When step 2 or 3 fails the earlier steps are
compensated (stock restored, order deleted) before the error is raised, so a
failed checkout leaves no order behind.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    OrderPersistenceError,
    ProductNotFoundError,
    StorefrontError,
)
from app.metrics import CHECKOUT_COUNTER
from app.services.cart import get_cart
from app.services.catalog import get_product
from app.utils.db import transactional
from app.utils.money import to_money
from models import db, utcnow
from models.cart import CartLine
from models.order import Order, OrderLine
from models.product import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLineDraft:
    product_id: int
    product_name: str
    product_image: str
    quantity: int
    price_at_purchase: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class OrderDraft:
    customer_id: str
    lines: Tuple[OrderLineDraft, ...]
    total_amount: Decimal


def build_order(customer_id: str) -> OrderDraft:
    cart_lines = get_cart(customer_id)
    if not cart_lines:
        raise EmptyCartError()

    lines: List[OrderLineDraft] = []
    total = to_money(0)
    for cart_line in cart_lines:
        product = get_product(cart_line.product_id)
        if not product:
            raise ProductNotFoundError(f"Product {cart_line.product_name} not found")
        if product.stock < cart_line.quantity:
            raise InsufficientStockError(product.name, cart_line.quantity, product.stock)

        price = to_money(product.price)
        subtotal = to_money(price * cart_line.quantity)
        lines.append(
            OrderLineDraft(
                product_id=product.id,
                product_name=product.name,
                product_image=product.image_url,
                quantity=cart_line.quantity,
                price_at_purchase=price,
                subtotal=subtotal,
            )
        )
        total += subtotal

    return OrderDraft(customer_id=customer_id, lines=tuple(lines), total_amount=total)


def find_order_by_key(customer_id: str, idempotency_key: Optional[str]) -> Optional[Order]:
    if not idempotency_key:
        return None
    return Order.query.filter_by(customer_id=customer_id, idempotency_key=idempotency_key).first()


def _create_order(draft: OrderDraft, idempotency_key: Optional[str]) -> Order:
    order = Order(
        customer_id=draft.customer_id,
        total_amount=draft.total_amount,
        status="completed",
        idempotency_key=idempotency_key,
        created_at=utcnow(),
    )
    for position, line in enumerate(draft.lines):
        order.lines.append(
            OrderLine(
                position=position,
                product_id=line.product_id,
                product_name=line.product_name,
                product_image=line.product_image,
                quantity=line.quantity,
                price_at_purchase=line.price_at_purchase,
                subtotal=line.subtotal,
            )
        )
    # a unique-key conflict is a concurrent replay, resolved by the caller
    expected = (IntegrityError,) if idempotency_key else ()
    with transactional("Failed to create order", expected=expected):
        db.session.add(order)
    return order


def _decrement_stock(draft: OrderDraft) -> None:
    now = utcnow()
    with transactional("Failed to decrement stock"):
        for line in draft.lines:
            product = Product.query.filter_by(id=line.product_id).with_for_update().first()
            if not product:
                raise ProductNotFoundError(f"Product {line.product_name} not found")
            if product.stock < line.quantity:
                raise InsufficientStockError(product.name, line.quantity, product.stock)
            product.stock -= line.quantity
            product.updated_at = now


def _restore_stock(draft: OrderDraft) -> None:
    now = utcnow()
    with transactional("Failed to restore stock"):
        for line in draft.lines:
            product = Product.query.filter_by(id=line.product_id).with_for_update().first()
            if product:
                product.stock += line.quantity
                product.updated_at = now


def _delete_order(order_id) -> None:
    with transactional("Failed to delete order"):
        order = db.session.get(Order, order_id)
        if order:
            db.session.delete(order)


def _clear_cart(customer_id: str) -> None:
    with transactional("Failed to clear cart after checkout"):
        CartLine.query.filter_by(customer_id=customer_id).delete()


def _compensate(order_id, draft: OrderDraft, restore_stock: bool) -> None:
    try:
        if restore_stock:
            _restore_stock(draft)
        _delete_order(order_id)
        logger.warning("Rolled back order %s after failed checkout", order_id)
    except SQLAlchemyError as e:
        logger.error(
            "Compensation failed for order %s (stock_restored=%s): %s",
            order_id, restore_stock, e, exc_info=True,
        )


def _place_order(draft: OrderDraft, idempotency_key: Optional[str]) -> Tuple[Order, bool]:
    """Run the three writes; returns the order and whether it was created here."""
    try:
        order = _create_order(draft, idempotency_key)
    except IntegrityError:
        existing = find_order_by_key(draft.customer_id, idempotency_key)
        if existing:
            return existing, False
        raise OrderPersistenceError()
    except SQLAlchemyError:
        raise OrderPersistenceError()
    order_id = order.id

    try:
        _decrement_stock(draft)
    except (StorefrontError, SQLAlchemyError) as e:
        _compensate(order_id, draft, restore_stock=False)
        if isinstance(e, StorefrontError):
            raise
        raise OrderPersistenceError()

    try:
        _clear_cart(draft.customer_id)
    except SQLAlchemyError:
        _compensate(order_id, draft, restore_stock=True)
        raise OrderPersistenceError()

    return order, True


def commit_order(draft: OrderDraft, idempotency_key: Optional[str] = None) -> Order:
    return _place_order(draft, idempotency_key)[0]


def checkout(customer_id: str, idempotency_key: Optional[str] = None) -> Order:
    """Validate the cart, then commit the order; replays return the first order."""
    existing = find_order_by_key(customer_id, idempotency_key)
    if existing:
        return _replayed(existing)

    try:
        draft = build_order(customer_id)
        order, created = _place_order(draft, idempotency_key)
    except StorefrontError as e:
        CHECKOUT_COUNTER.labels(type(e).__name__).inc()
        raise
    if not created:
        return _replayed(order)

    CHECKOUT_COUNTER.labels("completed").inc()
    logger.info(
        "Order %s placed by %s: %d lines, total %s",
        order.id, customer_id, len(draft.lines), draft.total_amount,
    )
    _queue_receipt(order.id)
    return order


def _replayed(order: Order) -> Order:
    CHECKOUT_COUNTER.labels("replayed").inc()
    logger.info("Checkout replay for order %s", order.id)
    return order


def _queue_receipt(order_id) -> None:
    from app.tasks.notifications import send_order_receipt_task
    try:
        send_order_receipt_task.delay(order_id)
    except Exception:
        logger.exception("Could not queue receipt for order %s", order_id)
