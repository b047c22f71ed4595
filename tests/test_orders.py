from decimal import Decimal

import pytest

from app.services import cart as cart_service
from app.services.checkout import checkout
from app.services.orders import get_customer_order, list_customer_orders
from app.tasks.notifications import send_order_receipt_task
from models import db
from models.product import Product


def test_checkout_route_places_order(client, customer, make_product, auth_header):
    product = make_product(name="Product A", price="10000", stock=5)
    cart_service.add_to_cart(customer.uid, product.id, 2)

    r = client.post("/api/v1/customer/checkout", headers=auth_header(customer))

    assert r.status_code == 201
    body = r.get_json()
    assert body["status"] == "success"
    assert body["order"]["total_amount"] == 20000.0
    assert body["order"]["status"] == "completed"
    assert body["order"]["items"][0]["product_name"] == "Product A"
    assert body["order"]["items"][0]["subtotal"] == 20000.0
    db.session.expire_all()
    assert db.session.get(Product, product.id).stock == 3


def test_checkout_route_with_idempotency_key_replays(client, customer, make_product, auth_header):
    product = make_product(stock=5)
    cart_service.add_to_cart(customer.uid, product.id, 1)
    headers = {**auth_header(customer), "Idempotency-Key": "abc-123"}

    first = client.post("/api/v1/customer/checkout", headers=headers)
    second = client.post("/api/v1/customer/checkout", headers=headers)

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.get_json()["order"]["id"] == second.get_json()["order"]["id"]


def test_checkout_route_empty_cart(client, customer, auth_header):
    r = client.post("/api/v1/customer/checkout", headers=auth_header(customer))
    assert r.status_code == 400
    body = r.get_json()
    assert body["status"] == "error"
    assert body["message"] == "Cart is empty"


def test_checkout_route_insufficient_stock(client, customer, make_product, auth_header):
    product = make_product(name="Product B", stock=2)
    cart_service.add_to_cart(customer.uid, product.id, 2)
    product.stock = 1
    db.session.commit()

    r = client.post("/api/v1/customer/checkout", headers=auth_header(customer))

    assert r.status_code == 409
    assert r.get_json()["message"] == "Not enough stock for Product B. Available: 1, requested: 2"


def test_order_history_newest_first(client, customer, make_product, auth_header):
    product = make_product(stock=10)
    cart_service.add_to_cart(customer.uid, product.id, 1)
    first = checkout(customer.uid)
    cart_service.add_to_cart(customer.uid, product.id, 2)
    second = checkout(customer.uid)

    r = client.get("/api/v1/customer/orders", headers=auth_header(customer))

    assert r.status_code == 200
    ids = [o["id"] for o in r.get_json()["orders"]]
    assert ids == [second.id, first.id]


def test_order_detail_hidden_from_other_customers(client, customer, make_user, make_product, auth_header):
    product = make_product(stock=10)
    cart_service.add_to_cart(customer.uid, product.id, 1)
    order = checkout(customer.uid)
    other = make_user("customer", "other@example.com")

    mine = client.get(f"/api/v1/customer/orders/{order.id}", headers=auth_header(customer))
    theirs = client.get(f"/api/v1/customer/orders/{order.id}", headers=auth_header(other))

    assert mine.status_code == 200
    assert mine.get_json()["order"]["id"] == order.id
    assert theirs.status_code == 404


def test_order_service_lookups(customer, make_user, make_product):
    product = make_product(stock=10)
    cart_service.add_to_cart(customer.uid, product.id, 3)
    order = checkout(customer.uid)
    other = make_user("customer", "other@example.com")

    assert [o.id for o in list_customer_orders(customer.uid)] == [order.id]
    assert list_customer_orders(other.uid) == []
    assert get_customer_order(customer.uid, order.id).total_amount == Decimal("30000.00")
    assert get_customer_order(other.uid, order.id) is None


def test_receipt_task_logs_receipt(customer, make_product, caplog):
    product = make_product(stock=10)
    cart_service.add_to_cart(customer.uid, product.id, 1)
    order = checkout(customer.uid)

    caplog.set_level("INFO", logger="app.tasks.notifications")
    assert send_order_receipt_task.run(order.id) is True
    receipts = [r.msg for r in caplog.records if isinstance(r.msg, dict)]
    assert receipts[-1]["event"] == "order_receipt"
    assert receipts[-1]["order_id"] == order.id
    assert receipts[-1]["items"] == 1


def test_receipt_task_missing_order(app):
    assert send_order_receipt_task.run(999999) is False


def test_receipt_task_retries_on_database_error(customer, monkeypatch):
    from celery.exceptions import Retry
    from sqlalchemy.exc import OperationalError

    def _db_down(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    retried = []

    def _retry(exc=None, **kwargs):
        retried.append(exc)
        return Retry("retry receipt", exc)

    monkeypatch.setattr(db.session, "get", _db_down)
    monkeypatch.setattr(send_order_receipt_task, "retry", _retry)

    with pytest.raises(Retry):
        send_order_receipt_task.run(1)
    assert isinstance(retried[0], OperationalError)


def test_order_status_is_a_closed_set(customer):
    from sqlalchemy.exc import IntegrityError
    from models.order import Order

    db.session.add(Order(customer_id=customer.uid, total_amount=Decimal("1"), status="shipped"))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()
