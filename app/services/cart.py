import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    OperationFailedError,
    ProductNotFoundError,
)
from app.services.catalog import get_product
from app.utils.db import transactional
from models import db, utcnow
from models.cart import CartLine

logger = logging.getLogger(__name__)


def _line(customer_id: str, product_id):
    return CartLine.query.filter_by(customer_id=customer_id, product_id=product_id).first()


def get_cart(customer_id: str) -> List[CartLine]:
    try:
        return CartLine.query.filter_by(customer_id=customer_id).order_by(CartLine.id.asc()).all()
    except SQLAlchemyError as e:
        logger.error("Error reading cart for %s: %s", customer_id, e)
        raise OperationFailedError("Failed to load cart. Please try again.")


def add_to_cart(customer_id: str, product_id, quantity: int = 1) -> CartLine:
    """Add ``quantity`` of a product, merging with an existing line.

    A merged line keeps the snapshot taken when it was first added; only the
    quantity changes, and the summed quantity must fit the current stock.
    """
    if quantity < 1:
        raise InvalidQuantityError()
    product = get_product(product_id)
    if not product:
        raise ProductNotFoundError()

    now = utcnow()
    line = _line(customer_id, product_id)
    if line:
        new_quantity = line.quantity + quantity
        if new_quantity > product.stock:
            raise InsufficientStockError(product.name, new_quantity, product.stock)
        line.quantity = new_quantity
        line.updated_at = now
    else:
        if quantity > product.stock:
            raise InsufficientStockError(product.name, quantity, product.stock)
        line = CartLine(
            customer_id=customer_id,
            product_id=product.id,
            quantity=quantity,
            added_at=now,
            updated_at=now,
            product_name=product.name,
            product_price=product.price,
            product_image_url=product.image_url,
            product_category=product.category,
            product_seller_id=product.seller_id,
        )
        db.session.add(line)
    try:
        with transactional("Failed to add to cart"):
            pass
    except SQLAlchemyError:
        raise OperationFailedError("Failed to add to cart. Please try again.")
    return line


def set_quantity(customer_id: str, product_id, quantity: int):
    """Overwrite a line's quantity; zero or less removes the line.

    Returns the updated line, or None when it was removed.
    """
    if quantity <= 0:
        remove_from_cart(customer_id, product_id)
        return None

    product = get_product(product_id)
    if not product:
        raise ProductNotFoundError()
    if quantity > product.stock:
        raise InsufficientStockError(product.name, quantity, product.stock)

    line = _line(customer_id, product_id)
    if not line:
        raise ProductNotFoundError("Product not found in cart")
    line.quantity = quantity
    line.updated_at = utcnow()
    try:
        with transactional("Failed to update cart quantity"):
            pass
    except SQLAlchemyError:
        raise OperationFailedError("Failed to update quantity. Please try again.")
    return line


def remove_from_cart(customer_id: str, product_id) -> None:
    try:
        with transactional("Failed to remove cart line"):
            CartLine.query.filter_by(customer_id=customer_id, product_id=product_id).delete()
    except SQLAlchemyError:
        raise OperationFailedError("Failed to remove product from cart. Please try again.")


def clear_cart(customer_id: str) -> None:
    try:
        with transactional("Failed to clear cart"):
            CartLine.query.filter_by(customer_id=customer_id).delete()
    except SQLAlchemyError:
        raise OperationFailedError("Failed to clear cart. Please try again.")


def cart_item_count(customer_id: str) -> int:
    try:
        return sum(line.quantity for line in get_cart(customer_id))
    except OperationFailedError:
        return 0
