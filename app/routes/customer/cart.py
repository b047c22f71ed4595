from flask import request, jsonify
from app.services import cart as cart_service
from app.schemas.cart import AddToCartRequest, RemoveFromCartRequest, SetQuantityRequest
from app.utils import validate_schema
from . import customer_bp


@customer_bp.route("/cart", methods=["GET"])
def view_cart():
    lines = cart_service.get_cart(request.user.uid)
    return jsonify({
        "status": "success",
        "cart": [line.to_dict() for line in lines],
        "item_count": sum(line.quantity for line in lines),
    }), 200


@customer_bp.route("/cart/count", methods=["GET"])
def cart_count():
    return jsonify({"status": "success", "count": cart_service.cart_item_count(request.user.uid)}), 200


@customer_bp.route("/cart/add", methods=["POST"])
@validate_schema(AddToCartRequest)
def add_to_cart():
    """Add a product to the cart, merging with an existing line.
    ---
    tags: [Customer]
    responses:
      200: {description: Cart line after the merge}
      404: {description: Product not found}
      409: {description: Not enough stock}
    """
    data = request.validated_data
    line = cart_service.add_to_cart(request.user.uid, data.product_id, data.quantity)
    return jsonify({"status": "success", "message": "Product added to cart", "line": line.to_dict()}), 200


@customer_bp.route("/cart/update", methods=["POST"])
@validate_schema(SetQuantityRequest)
def update_cart_quantity():
    data = request.validated_data
    line = cart_service.set_quantity(request.user.uid, data.product_id, data.quantity)
    if line is None:
        return jsonify({"status": "success", "message": "Product removed from cart"}), 200
    return jsonify({"status": "success", "message": "Cart quantity updated", "line": line.to_dict()}), 200


@customer_bp.route("/cart/remove", methods=["POST"])
@validate_schema(RemoveFromCartRequest)
def remove_item():
    cart_service.remove_from_cart(request.user.uid, request.validated_data.product_id)
    return jsonify({"status": "success", "message": "Product removed from cart"}), 200


@customer_bp.route("/cart/clear", methods=["POST"])
def clear_cart():
    cart_service.clear_cart(request.user.uid)
    return jsonify({"status": "success", "message": "Cart cleared"}), 200
