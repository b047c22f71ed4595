from app.version import API_PREFIX


def test_blueprint_access(client, customer, seller, auth_header):
    c_hdr = auth_header(customer)
    s_hdr = auth_header(seller)

    # customer routes
    assert client.get(f"{API_PREFIX}/customer/cart", headers=c_hdr).status_code == 200
    assert client.get(f"{API_PREFIX}/customer/cart", headers=s_hdr).status_code == 403
    assert client.post(f"{API_PREFIX}/customer/checkout", headers=s_hdr).status_code == 403

    # seller routes
    assert client.get(f"{API_PREFIX}/seller/products", headers=s_hdr).status_code == 200
    assert client.get(f"{API_PREFIX}/seller/products", headers=c_hdr).status_code == 403


def test_routes_require_token(client):
    assert client.get(f"{API_PREFIX}/customer/orders").status_code == 401
    assert client.get(f"{API_PREFIX}/seller/products").status_code == 401
    assert client.get(
        f"{API_PREFIX}/seller/products", headers={"Authorization": "Bearer nonsense"}
    ).status_code == 401


def test_role_comes_from_profile_not_token(client, customer):
    from app.utils import create_access_token

    forged = create_access_token(customer.uid, "seller")
    r = client.get(f"{API_PREFIX}/seller/products", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 403
