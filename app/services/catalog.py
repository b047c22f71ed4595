import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import OperationFailedError, ProductNotFoundError
from app.storage import get_image_store
from app.utils.db import transactional
from models import db, utcnow
from models.product import DEFAULT_IMAGE_URL, Product

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "price", "stock", "category")


def _delete_image(image_url: str) -> None:
    if image_url and image_url != DEFAULT_IMAGE_URL:
        get_image_store().delete(image_url)


def get_product(product_id) -> Optional[Product]:
    try:
        return db.session.get(Product, product_id)
    except SQLAlchemyError as e:
        logger.error("Error getting product %s: %s", product_id, e)
        return None


def get_seller_product(seller_id: str, product_id) -> Product:
    product = get_product(product_id)
    if not product or product.seller_id != seller_id:
        raise ProductNotFoundError()
    return product


def create_product(seller_id: str, data: dict, image=None) -> Product:
    image_url = DEFAULT_IMAGE_URL
    if image is not None:
        image_url = get_image_store().upload(image, seller_id)

    now = utcnow()
    product = Product(
        seller_id=seller_id,
        name=data["name"],
        description=data["description"],
        price=data["price"],
        stock=data["stock"],
        category=data["category"],
        image_url=image_url,
        created_at=now,
        updated_at=now,
    )
    try:
        with transactional("Failed to add product"):
            db.session.add(product)
    except SQLAlchemyError:
        _delete_image(image_url)
        raise OperationFailedError("Failed to add product. Please try again.")
    logger.info("Seller %s created product %s", seller_id, product.id)
    return product


def list_seller_products(seller_id: str, category: str = None, search: str = None) -> List[Product]:
    query = Product.query.filter_by(seller_id=seller_id)
    if category:
        query = query.filter_by(category=category)
    try:
        products = query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    except SQLAlchemyError as e:
        logger.error("Error listing products for seller %s: %s", seller_id, e)
        raise OperationFailedError("Failed to load products. Please try again.")

    # Name search runs after retrieval; the query only filters on equality
    if search:
        needle = search.lower()
        products = [p for p in products if needle in p.name.lower()]
    return products


def list_available_products() -> List[Product]:
    try:
        return (
            Product.query.filter(Product.stock > 0)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Error listing products: %s", e)
        raise OperationFailedError("Failed to load products. Please try again.")


def update_product(seller_id: str, product_id, data: dict, image=None) -> Product:
    """Apply a partial update; a new image replaces the old one only once saved."""
    product = get_seller_product(seller_id, product_id)
    old_image_url = new_image_url = None
    if image is not None:
        new_image_url = get_image_store().upload(image, product.seller_id)
        old_image_url = product.image_url
        product.image_url = new_image_url

    for field in UPDATABLE_FIELDS:
        if data.get(field) is not None:
            setattr(product, field, data[field])
    product.updated_at = utcnow()
    try:
        with transactional("Failed to update product"):
            pass
    except SQLAlchemyError:
        if old_image_url is not None:
            _delete_image(new_image_url)
        raise OperationFailedError("Failed to update product. Please try again.")

    if old_image_url is not None:
        _delete_image(old_image_url)
    return product


def delete_product(seller_id: str, product_id) -> None:
    product = get_seller_product(seller_id, product_id)
    _delete_image(product.image_url)
    try:
        with transactional("Failed to delete product"):
            db.session.delete(product)
    except SQLAlchemyError:
        raise OperationFailedError("Failed to delete product. Please try again.")
    logger.info("Seller %s deleted product %s", seller_id, product_id)


def delete_products(seller_id: str, product_ids: Iterable) -> List:
    """Delete each product independently and return the ids that were deleted.

    There is no rollback: when some deletes fail the others stay deleted and
    OperationFailedError is raised after every id was attempted.
    """
    deleted, failed = [], []
    for product_id in product_ids:
        try:
            delete_product(seller_id, product_id)
            deleted.append(product_id)
        except (ProductNotFoundError, OperationFailedError) as e:
            logger.warning("Bulk delete of product %s failed: %s", product_id, e)
            failed.append(product_id)
    if failed:
        raise OperationFailedError(
            f"Failed to delete {len(failed)} of {len(deleted) + len(failed)} products"
        )
    return deleted
