import pytest
from sqlalchemy import update

from app.version import API_PREFIX
from app.services.fulfillment import OrderConflict, TERMINAL_STATUSES, can_transition, transition_order
from models import db
from models.order import Order, OrderStatusLog
from models.product import Product

SELLER = f"{API_PREFIX}/seller"
CONSUMER = f"{API_PREFIX}/consumer"
CONTACT = {'delivery_address': 'KG 11 Ave, Kigali', 'phone_number': '+250788000000'}


@pytest.fixture
def placed_order(client, auth_headers, make_product, put_in_cart):
    """A pending order for 2 of 5 units; returns (order_id, product_id)."""
    bread = make_product(quantity=5)
    put_in_cart(bread, 2)
    resp = client.post(f"{CONSUMER}/checkout", json=CONTACT, headers=auth_headers('consumer'))
    assert resp.status_code == 201
    return resp.get_json()['order_ids'][0], bread.id


def _stock(product_id):
    db.session.expire_all()
    return db.session.get(Product, product_id).quantity


@pytest.mark.parametrize('current,target,allowed', [
    ('pending', 'confirmed', True),
    ('pending', 'ready', False),
    ('confirmed', 'ready', True),
    ('preparing', 'completed', False),
    ('ready', 'completed', True),
    ('completed', 'cancelled', False),
])
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed
    assert TERMINAL_STATUSES == {'completed', 'cancelled'}


def test_seller_walks_order_to_completed(client, auth_headers, placed_order):
    order_id, _ = placed_order
    hdr = auth_headers('fbo')
    for status in ('confirmed', 'preparing', 'ready', 'completed'):
        resp = client.post(f"{SELLER}/orders/{order_id}/status", json={'status': status}, headers=hdr)
        assert resp.status_code == 200, resp.get_json()
        assert resp.get_json()['order']['status'] == status

    logs = OrderStatusLog.query.filter_by(order_id=order_id).order_by(OrderStatusLog.id).all()
    assert [entry.status for entry in logs] == ['pending', 'confirmed', 'preparing', 'ready', 'completed']

    resp = client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'ready'}, headers=hdr)
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Order already closed'


def test_seller_sets_pickup_time_when_ready(client, auth_headers, placed_order):
    order_id, _ = placed_order
    hdr = auth_headers('fbo')
    resp = client.post(f"{SELLER}/orders/{order_id}/status",
                       json={'status': 'confirmed', 'pickup_time': '2030-01-05T17:30:00'}, headers=hdr)
    assert resp.status_code == 400
    assert db.session.get(Order, order_id).status == 'pending'

    client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'confirmed'}, headers=hdr)
    resp = client.post(f"{SELLER}/orders/{order_id}/status",
                       json={'status': 'ready', 'pickup_time': '2030-01-05T17:30:00'}, headers=hdr)
    assert resp.status_code == 200
    assert resp.get_json()['order']['pickup_time'] == '2030-01-05T17:30:00'


def test_skipping_states_is_rejected(client, auth_headers, placed_order):
    order_id, _ = placed_order
    resp = client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'completed'},
                       headers=auth_headers('fbo'))
    assert resp.status_code == 400
    assert db.session.get(Order, order_id).status == 'pending'


def test_status_endpoint_refuses_cancel_and_unknown(client, auth_headers, placed_order):
    order_id, _ = placed_order
    hdr = auth_headers('fbo')
    resp = client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'cancelled'}, headers=hdr)
    assert resp.status_code == 400
    assert 'cancel endpoint' in resp.get_json()['message']
    resp = client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'shipped'}, headers=hdr)
    assert resp.status_code == 400


def test_seller_cancel_restocks(client, auth_headers, placed_order):
    order_id, product_id = placed_order
    hdr = auth_headers('fbo')
    assert _stock(product_id) == 3
    client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'confirmed'}, headers=hdr)

    resp = client.post(f"{SELLER}/orders/{order_id}/cancel", headers=hdr)
    assert resp.status_code == 200
    assert _stock(product_id) == 5

    # second cancel is a no-op error, stock untouched
    resp = client.post(f"{SELLER}/orders/{order_id}/cancel", headers=hdr)
    assert resp.status_code == 400
    assert _stock(product_id) == 5


def test_other_seller_cannot_touch_order(client, auth_headers, placed_order):
    order_id, _ = placed_order
    other = auth_headers('fbo', 'rival@example.com')
    assert client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'confirmed'},
                       headers=other).status_code == 403
    assert client.post(f"{SELLER}/orders/{order_id}/cancel", headers=other).status_code == 403
    assert client.post(f"{SELLER}/orders/424242/cancel", headers=other).status_code == 404


def test_buyer_can_cancel_only_pending(client, auth_headers, placed_order):
    order_id, product_id = placed_order
    buyer = auth_headers('consumer')
    client.post(f"{SELLER}/orders/{order_id}/status", json={'status': 'confirmed'}, headers=auth_headers('fbo'))

    resp = client.post(f"{CONSUMER}/orders/{order_id}/cancel", headers=buyer)
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Only pending orders can be cancelled'
    assert _stock(product_id) == 3


def test_buyer_cancel_pending_restocks_and_logs(client, auth_headers, placed_order):
    order_id, product_id = placed_order
    buyer = auth_headers('consumer')
    resp = client.post(f"{CONSUMER}/orders/{order_id}/cancel", headers=buyer)
    assert resp.status_code == 200
    assert _stock(product_id) == 5

    detail = client.get(f"{CONSUMER}/orders/{order_id}", headers=buyer).get_json()['order']
    assert detail['status'] == 'cancelled'
    assert [h['status'] for h in detail['history']] == ['pending', 'cancelled']


def test_other_buyer_cannot_see_or_cancel(client, auth_headers, placed_order):
    order_id, _ = placed_order
    stranger = auth_headers('consumer', 'stranger@example.com')
    assert client.get(f"{CONSUMER}/orders/{order_id}", headers=stranger).status_code == 404
    assert client.post(f"{CONSUMER}/orders/{order_id}/cancel", headers=stranger).status_code == 404
    assert client.get(f"{CONSUMER}/orders", headers=stranger).get_json()['orders'] == []


def test_seller_order_list_filters_by_status(client, auth_headers, placed_order):
    order_id, _ = placed_order
    hdr = auth_headers('fbo')
    data = client.get(f"{SELLER}/orders", query_string={'status': 'pending'}, headers=hdr).get_json()
    assert [o['order_id'] for o in data['orders']] == [order_id]
    assert data['orders'][0]['customer']['email'] == 'consumer@example.com'
    assert client.get(f"{SELLER}/orders", query_string={'status': 'ready'}, headers=hdr).get_json()['orders'] == []
    assert client.get(f"{SELLER}/orders", query_string={'status': 'bogus'}, headers=hdr).status_code == 400


def test_stale_status_claim_is_a_conflict(client, auth_headers, placed_order):
    order_id, _ = placed_order
    order = db.session.get(Order, order_id)
    assert order.status == 'pending'
    # Someone else confirms the order after it was loaded
    db.session.execute(
        update(Order).where(Order.id == order_id).values(status='confirmed')
        .execution_options(synchronize_session=False)
    )
    with pytest.raises(OrderConflict):
        transition_order(order, 'cancelled', actor_id=order.seller_id)
    db.session.rollback()
