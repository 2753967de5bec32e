from datetime import date, timedelta

import pytest

from app.version import API_PREFIX
from models import db
from models.cart import CartItem
from models.product import Product

PRODUCTS = f"{API_PREFIX}/seller/products"
CONSUMER = f"{API_PREFIX}/consumer"


def _payload(**overrides):
    body = {
        'name': 'Sourdough',
        'category': 'bakery',
        'original_price': '1500',
        'discounted_price': '900',
        'quantity': 4,
        'expiry_date': (date.today() + timedelta(days=2)).isoformat(),
    }
    body.update(overrides)
    return body


def test_create_and_list_own_products(client, auth_headers):
    hdr = auth_headers('fbo')
    resp = client.post(PRODUCTS, json=_payload(), headers=hdr)
    assert resp.status_code == 201
    product = resp.get_json()['product']
    assert product['name'] == 'Sourdough'
    assert product['is_active'] is True

    listed = client.get(PRODUCTS, headers=hdr).get_json()['products']
    assert [p['id'] for p in listed] == [product['id']]
    assert client.get(PRODUCTS, headers=auth_headers('fbo', 'other@example.com')).get_json()['products'] == []


def test_create_validation(client, auth_headers):
    hdr = auth_headers('fbo')
    bad = [
        _payload(discounted_price='1500'),
        _payload(expiry_date=date.today().isoformat()),
        _payload(category='furniture'),
        _payload(quantity=-1),
        _payload(name=''),
        _payload(image_urls=[f'http://x/{i}.png' for i in range(6)]),
    ]
    for body in bad:
        assert client.post(PRODUCTS, json=body, headers=hdr).status_code == 400
    assert Product.query.count() == 0


def test_consumer_cannot_manage_products(client, auth_headers):
    assert client.post(PRODUCTS, json=_payload(), headers=auth_headers('consumer')).status_code == 403


def test_update_checks_prices_against_stored_values(client, auth_headers, make_product):
    hdr = auth_headers('fbo')
    bread = make_product(original='1200', discounted='900')
    resp = client.post(f"{PRODUCTS}/{bread.id}", json={'discounted_price': '1300'}, headers=hdr)
    assert resp.status_code == 400

    resp = client.post(f"{PRODUCTS}/{bread.id}", json={'name': 'Rye', 'discounted_price': '800'}, headers=hdr)
    assert resp.status_code == 200
    assert resp.get_json()['product']['name'] == 'Rye'
    assert resp.get_json()['product']['quantity'] == 5


@pytest.mark.parametrize('field', ['name', 'category', 'original_price', 'discounted_price', 'expiry_date'])
def test_update_rejects_null_for_required_fields(client, auth_headers, make_product, field):
    bread = make_product()
    resp = client.post(f"{PRODUCTS}/{bread.id}", json={field: None}, headers=auth_headers('fbo'))
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == field
    db.session.refresh(bread)
    assert bread.name == 'Bread'


def test_update_allows_clearing_description(client, auth_headers, make_product):
    bread = make_product()
    resp = client.post(f"{PRODUCTS}/{bread.id}", json={'description': None}, headers=auth_headers('fbo'))
    assert resp.status_code == 200


def test_update_of_other_sellers_product_is_404(client, auth_headers, make_product):
    bread = make_product()
    resp = client.post(f"{PRODUCTS}/{bread.id}", json={'name': 'Mine'},
                       headers=auth_headers('fbo', 'other@example.com'))
    assert resp.status_code == 404


def test_stock_adjustment(client, auth_headers, make_product):
    hdr = auth_headers('fbo')
    bread = make_product(quantity=3)
    resp = client.post(f"{PRODUCTS}/{bread.id}/stock", json={'delta': 4}, headers=hdr)
    assert resp.get_json()['quantity'] == 7
    resp = client.post(f"{PRODUCTS}/{bread.id}/stock", json={'delta': -7}, headers=hdr)
    assert resp.get_json()['quantity'] == 0

    resp = client.post(f"{PRODUCTS}/{bread.id}/stock", json={'delta': -1}, headers=hdr)
    assert resp.status_code == 400
    assert 'Not enough stock' in resp.get_json()['message']
    assert client.post(f"{PRODUCTS}/{bread.id}/stock", json={'delta': 0}, headers=hdr).status_code == 400


def test_toggle_hides_from_catalog(client, auth_headers, make_product):
    hdr = auth_headers('fbo')
    bread = make_product()
    resp = client.post(f"{PRODUCTS}/{bread.id}/toggle", headers=hdr)
    assert resp.get_json()['is_active'] is False
    assert client.get(f"{API_PREFIX}/products/{bread.id}").status_code == 404
    assert client.post(f"{PRODUCTS}/{bread.id}/toggle", headers=hdr).get_json()['is_active'] is True


def test_delete_unordered_product_removes_it(client, auth_headers, make_product, put_in_cart):
    hdr = auth_headers('fbo')
    bread = make_product()
    put_in_cart(bread, 1)
    resp = client.delete(f"{PRODUCTS}/{bread.id}", headers=hdr)
    assert resp.status_code == 200
    assert resp.get_json()['result'] == 'deleted'
    assert Product.query.count() == 0
    assert CartItem.query.count() == 0


def test_delete_ordered_product_deactivates(client, auth_headers, make_product, put_in_cart):
    bread = make_product(quantity=5)
    put_in_cart(bread, 1)
    client.post(f"{CONSUMER}/checkout", json={'delivery_address': 'Kigali', 'phone_number': '0788'},
                headers=auth_headers('consumer'))

    resp = client.delete(f"{PRODUCTS}/{bread.id}", headers=auth_headers('fbo'))
    assert resp.get_json()['result'] == 'deactivated'
    db.session.expire_all()
    assert db.session.get(Product, bread.id).is_active is False


def test_dashboard_stats(client, auth_headers, make_product, put_in_cart):
    bread = make_product(original='1200', discounted='900', quantity=5)
    make_product(name='Hidden', is_active=False)
    put_in_cart(bread, 2)
    resp = client.post(f"{CONSUMER}/checkout", json={'delivery_address': 'Kigali', 'phone_number': '0788'},
                       headers=auth_headers('consumer'))
    order_id = resp.get_json()['order_ids'][0]

    hdr = auth_headers('fbo')
    stats = client.get(f"{API_PREFIX}/seller/dashboard", headers=hdr).get_json()['stats']
    assert stats == {'products_count': 1, 'orders_count': 1, 'pending_orders_count': 1, 'total_revenue': 0.0}

    for status in ('confirmed', 'ready', 'completed'):
        client.post(f"{API_PREFIX}/seller/orders/{order_id}/status", json={'status': status}, headers=hdr)
    stats = client.get(f"{API_PREFIX}/seller/dashboard", headers=hdr).get_json()['stats']
    assert stats['pending_orders_count'] == 0
    assert stats['total_revenue'] == 1800.0
