import os
import sys
from datetime import date, timedelta
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db
from models.cart import CartItem
from models.product import Product
from app.config import TestingConfig
from app.utils import create_access_token
from app.test_support import ensure_user


@pytest.fixture(scope='session')
def app_instance(tmp_path_factory):
    os.environ.setdefault('APP_ENV', 'testing')
    from app import create_app
    app = create_app(TestingConfig)
    app.config.update(STORAGE_ROOT=str(tmp_path_factory.mktemp('storage')))
    return app


@pytest.fixture(scope='function')
def app(app_instance):
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
    def _make(email, role='consumer', **fields):
        return ensure_user(email, role, **fields)
    return _make


@pytest.fixture
def auth_headers(app, make_user):
    """Headers for a user created on the fly: auth_headers('fbo', 'a@x.rw')."""
    def _headers(role='consumer', email=None):
        user = make_user(email or f'{role}@example.com', role)
        return {'Authorization': f'Bearer {create_access_token(user.id, user.role)}'}
    return _headers


@pytest.fixture
def make_product(app, make_user):
    def _make(seller_email='fbo@example.com', name='Bread', original='1200', discounted='900',
              quantity=5, days=2, category='bakery', is_active=True):
        seller = make_user(seller_email, 'fbo')
        product = Product(
            seller_id=seller.id,
            name=name,
            category=category,
            original_price=Decimal(original),
            discounted_price=Decimal(discounted),
            quantity=quantity,
            expiry_date=date.today() + timedelta(days=days),
            is_active=is_active,
        )
        db.session.add(product)
        db.session.commit()
        return product
    return _make


@pytest.fixture
def put_in_cart(app, make_user):
    """Insert a cart row directly, bypassing the cart API stock checks."""
    def _put(product, quantity, email='consumer@example.com'):
        buyer = make_user(email, 'consumer')
        db.session.add(CartItem(user_id=buyer.id, product_id=product.id, quantity=quantity))
        db.session.commit()
        return buyer
    return _put


@pytest.fixture
def build_app(tmp_path):
    """Create a separate app with TestingConfig overrides: build_app(CORS_ALLOWED_ORIGINS='...')."""
    import extensions
    from app import create_app

    def _build(**overrides):
        overrides.setdefault('STORAGE_ROOT', str(tmp_path))
        config = type('OverrideConfig', (TestingConfig,), overrides)
        return create_app(config)

    yield _build
    # init_app toggles the shared limiter; put it back the way the session app expects
    if extensions.limiter.enabled:
        extensions.limiter.reset()
    extensions.limiter.enabled = False
