from decimal import Decimal

import pytest

from app.exceptions import InsufficientStockError, InvalidQuantityError, ProductNotFoundError
from app.services.cart import (
    add_to_cart,
    cart_item_count,
    clear_cart,
    get_cart,
    remove_from_cart,
    set_quantity,
)
from app.version import API_PREFIX
from models import db
from models.cart import CartLine


def test_add_creates_line_with_snapshot(customer, make_product):
    product = make_product(name="Desk Lamp", price="150000", stock=5, category="electronics")

    line = add_to_cart(customer.uid, product.id, 2)

    assert line.quantity == 2
    assert line.product_name == "Desk Lamp"
    assert line.product_price == Decimal("150000.00")
    assert line.product_category == "electronics"
    assert line.product_seller_id == product.seller_id
    assert line.product_image_url == product.image_url


def test_add_merges_by_summing_quantities(customer, make_product):
    product = make_product(stock=5)
    add_to_cart(customer.uid, product.id, 2)
    add_to_cart(customer.uid, product.id, 3)

    lines = get_cart(customer.uid)
    assert len(lines) == 1
    assert lines[0].quantity == 5


def test_merge_keeps_original_snapshot(customer, make_product):
    product = make_product(name="Old Name Item", price="100", stock=10)
    add_to_cart(customer.uid, product.id, 1)
    product.name = "New Name Item"
    product.price = Decimal("200")
    db.session.commit()

    line = add_to_cart(customer.uid, product.id, 1)

    assert line.quantity == 2
    assert line.product_name == "Old Name Item"
    assert line.product_price == Decimal("100.00")


def test_merged_quantity_checked_against_stock(customer, make_product):
    product = make_product(name="Limited Item", stock=4)
    add_to_cart(customer.uid, product.id, 3)

    with pytest.raises(InsufficientStockError) as exc:
        add_to_cart(customer.uid, product.id, 2)

    assert exc.value.requested == 5
    assert exc.value.available == 4
    assert get_cart(customer.uid)[0].quantity == 3


def test_add_more_than_stock_rejected(customer, make_product):
    product = make_product(stock=1)
    with pytest.raises(InsufficientStockError):
        add_to_cart(customer.uid, product.id, 2)
    assert get_cart(customer.uid) == []


def test_add_unknown_product(customer):
    with pytest.raises(ProductNotFoundError):
        add_to_cart(customer.uid, 424242, 1)


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_requires_positive_quantity(customer, make_product, quantity):
    product = make_product()
    with pytest.raises(InvalidQuantityError):
        add_to_cart(customer.uid, product.id, quantity)


def test_cart_lines_in_insertion_order(customer, make_product):
    a = make_product(name="First Item")
    b = make_product(name="Second Item")
    add_to_cart(customer.uid, b.id, 1)
    add_to_cart(customer.uid, a.id, 1)

    assert [l.product_id for l in get_cart(customer.uid)] == [b.id, a.id]


def test_set_quantity_overwrites(customer, make_product):
    product = make_product(stock=5)
    add_to_cart(customer.uid, product.id, 1)

    line = set_quantity(customer.uid, product.id, 4)

    assert line.quantity == 4
    assert get_cart(customer.uid)[0].quantity == 4


@pytest.mark.parametrize("quantity", [0, -3])
def test_set_quantity_zero_or_less_removes_line(customer, make_product, quantity):
    product = make_product(stock=5)
    add_to_cart(customer.uid, product.id, 2)

    assert set_quantity(customer.uid, product.id, quantity) is None
    assert get_cart(customer.uid) == []


def test_set_quantity_checks_current_stock(customer, make_product):
    product = make_product(stock=5)
    add_to_cart(customer.uid, product.id, 1)
    product.stock = 2
    db.session.commit()

    with pytest.raises(InsufficientStockError):
        set_quantity(customer.uid, product.id, 3)
    assert get_cart(customer.uid)[0].quantity == 1


def test_set_quantity_for_missing_line(customer, make_product):
    product = make_product(stock=5)
    with pytest.raises(ProductNotFoundError):
        set_quantity(customer.uid, product.id, 1)


def test_remove_and_clear(customer, make_product):
    a = make_product(name="First Item")
    b = make_product(name="Second Item")
    add_to_cart(customer.uid, a.id, 1)
    add_to_cart(customer.uid, b.id, 1)

    remove_from_cart(customer.uid, a.id)
    assert [l.product_id for l in get_cart(customer.uid)] == [b.id]

    clear_cart(customer.uid)
    assert get_cart(customer.uid) == []


def test_clear_only_touches_own_cart(customer, make_user, make_product):
    product = make_product(stock=10)
    other = make_user("customer", "other@example.com")
    add_to_cart(customer.uid, product.id, 1)
    add_to_cart(other.uid, product.id, 1)

    clear_cart(customer.uid)

    assert CartLine.query.filter_by(customer_id=other.uid).count() == 1


def test_item_count_sums_quantities(customer, make_product):
    a = make_product(name="First Item", stock=10)
    b = make_product(name="Second Item", stock=10)
    add_to_cart(customer.uid, a.id, 2)
    add_to_cart(customer.uid, b.id, 3)

    assert cart_item_count(customer.uid) == 5


def test_item_count_is_zero_when_lookup_fails(customer, monkeypatch):
    from app.exceptions import OperationFailedError
    from app.services import cart as cart_service

    def _fail(customer_id):
        raise OperationFailedError("Failed to load cart. Please try again.")

    monkeypatch.setattr(cart_service, "get_cart", _fail)
    assert cart_item_count(customer.uid) == 0


# --- routes ---

def test_cart_routes(client, customer, make_product, auth_header):
    product = make_product(name="Route Item", price="2500", stock=5)
    hdr = auth_header(customer)

    r = client.post(f"{API_PREFIX}/customer/cart/add", json={"product_id": product.id, "quantity": 2}, headers=hdr)
    assert r.status_code == 200
    assert r.get_json()["line"]["product"]["name"] == "Route Item"

    r = client.get(f"{API_PREFIX}/customer/cart", headers=hdr)
    body = r.get_json()
    assert r.status_code == 200
    assert body["item_count"] == 2
    assert body["cart"][0]["product"]["price"] == 2500.0

    r = client.post(f"{API_PREFIX}/customer/cart/update", json={"product_id": product.id, "quantity": 4}, headers=hdr)
    assert r.status_code == 200
    assert r.get_json()["line"]["quantity"] == 4

    r = client.get(f"{API_PREFIX}/customer/cart/count", headers=hdr)
    assert r.get_json()["count"] == 4

    r = client.post(f"{API_PREFIX}/customer/cart/update", json={"product_id": product.id, "quantity": 0}, headers=hdr)
    assert r.status_code == 200
    assert r.get_json()["message"] == "Product removed from cart"

    r = client.get(f"{API_PREFIX}/customer/cart/count", headers=hdr)
    assert r.get_json()["count"] == 0


def test_cart_add_validation_error(client, customer, auth_header):
    r = client.post(f"{API_PREFIX}/customer/cart/add", json={"product_id": 1, "quantity": 0}, headers=auth_header(customer))
    assert r.status_code == 400
    body = r.get_json()
    assert body["status"] == "error"
    assert body["errors"][0]["field"] == "quantity"


def test_cart_add_over_stock_is_conflict(client, customer, make_product, auth_header):
    product = make_product(stock=1)
    r = client.post(
        f"{API_PREFIX}/customer/cart/add",
        json={"product_id": product.id, "quantity": 2},
        headers=auth_header(customer),
    )
    assert r.status_code == 409


def test_cart_remove_and_clear_routes(client, customer, make_product, auth_header):
    a = make_product(name="First Item")
    b = make_product(name="Second Item")
    add_to_cart(customer.uid, a.id, 1)
    add_to_cart(customer.uid, b.id, 1)
    hdr = auth_header(customer)

    r = client.post(f"{API_PREFIX}/customer/cart/remove", json={"product_id": a.id}, headers=hdr)
    assert r.status_code == 200
    assert client.get(f"{API_PREFIX}/customer/cart/count", headers=hdr).get_json()["count"] == 1

    r = client.post(f"{API_PREFIX}/customer/cart/clear", headers=hdr)
    assert r.status_code == 200
    assert client.get(f"{API_PREFIX}/customer/cart", headers=hdr).get_json()["cart"] == []
