from flask import jsonify
from app.exceptions import ProductNotFoundError
from app.services.catalog import get_product, list_available_products
from . import customer_bp


@customer_bp.route("/products", methods=["GET"])
def browse_products():
    """Products with stock left, newest first.
    ---
    tags: [Customer]
    responses:
      200: {description: Product list}
    """
    products = list_available_products()
    return jsonify({"status": "success", "products": [p.to_dict() for p in products]}), 200


@customer_bp.route("/products/<int:product_id>", methods=["GET"])
def product_detail(product_id):
    product = get_product(product_id)
    if not product:
        raise ProductNotFoundError()
    return jsonify({"status": "success", "product": product.to_dict()}), 200
