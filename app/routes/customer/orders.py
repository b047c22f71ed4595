from flask import request, jsonify, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.services.checkout import checkout
from app.services.orders import get_customer_order, list_customer_orders
from app.utils import error
from . import customer_bp


@customer_bp.route("/checkout", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["CHECKOUT_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
def place_order():
    """Turn the cart into a completed order.

    Send an ``Idempotency-Key`` header to make retries safe.
    ---
    tags: [Customer]
    responses:
      201: {description: Order placed}
      400: {description: Cart is empty}
      409: {description: Not enough stock}
    """
    key = (request.headers.get("Idempotency-Key") or "").strip()[:128] or None
    order = checkout(request.user.uid, idempotency_key=key)
    return jsonify({
        "status": "success",
        "message": "Order placed successfully",
        "order": order.to_dict(),
    }), 201


@customer_bp.route("/orders", methods=["GET"])
def order_history():
    orders = list_customer_orders(request.user.uid)
    return jsonify({"status": "success", "orders": [o.to_dict() for o in orders]}), 200


@customer_bp.route("/orders/<int:order_id>", methods=["GET"])
def order_detail(order_id):
    order = get_customer_order(request.user.uid, order_id)
    if not order:
        return error("Order not found", status=404)
    return jsonify({"status": "success", "order": order.to_dict()}), 200
