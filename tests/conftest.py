import os
import sys
import tempfile
import uuid
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')
os.environ.setdefault('IMAGE_STORAGE_DIR', tempfile.mkdtemp(prefix='storefront-media-'))

from werkzeug.security import generate_password_hash
from models import db
from models.product import Product
from models.user import UserProfile


@pytest.fixture(scope='session')
def app_instance():
    from app import create_app
    app = create_app()
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI='sqlite:///:memory:',
        SQLALCHEMY_TRACK_MODIFICATIONS=False
    )
    return app


@pytest.fixture(scope='function')
def app(app_instance, tmp_path):
    app_instance.config["IMAGE_STORAGE_DIR"] = str(tmp_path / "media")
    app_instance.extensions.pop("image_store", None)
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(role="customer", email=None, password="password123", disabled=False):
        user = UserProfile(
            uid=uuid.uuid4().hex,
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            password_hash=generate_password_hash(password),
            role=role,
            is_disabled=disabled,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def seller(make_user):
    return make_user("seller", "seller@example.com")


@pytest.fixture
def customer(make_user):
    return make_user("customer", "customer@example.com")


@pytest.fixture
def make_product(app, seller):
    def _make(name="Test Product", price="10000", stock=5, category="other", owner=None):
        product = Product(
            seller_id=(owner or seller).uid,
            name=name,
            description="A product",
            price=Decimal(price),
            stock=stock,
            category=category,
        )
        db.session.add(product)
        db.session.commit()
        return product
    return _make


@pytest.fixture
def auth_header(app):
    from app.utils import create_access_token

    def _header(user):
        return {"Authorization": f"Bearer {create_access_token(user.uid, user.role)}"}
    return _header
