import logging

from app.tasks.notifications import new_order_message, notify_seller_new_order_task
from models import db
from models.order import Order


def test_seller_message_lists_items(client, auth_headers, make_product, put_in_cart):
    bread = make_product(name='Bread', original='1200', discounted='900')
    put_in_cart(bread, 2)
    resp = client.post('/api/v1/consumer/checkout',
                       json={'delivery_address': 'Kigali', 'phone_number': '0788', 'notes': 'ring twice'},
                       headers=auth_headers('consumer'))
    order = db.session.get(Order, resp.get_json()['order_ids'][0])

    message = new_order_message(order)
    assert message.splitlines()[0] == f'New order #{order.id} (pending)'
    assert '- 2 x Bread @ 900.00' in message
    assert 'Total: RWF 1800.00' in message
    assert message.endswith('Notes: ring twice')


def test_missing_order_is_skipped(app, caplog):
    caplog.set_level(logging.WARNING)
    assert notify_seller_new_order_task(4242) is False
    assert any('vanished' in r.getMessage() for r in caplog.records)
