import json
import logging

from flask import g

from app.logging import JsonFormatter, MaskingFilter, RequestContextFilter


def _record(msg, level=logging.INFO):
    return logging.LogRecord('zw', level, __file__, 1, msg, None, None)


def test_request_id_header_and_propagation(client):
    resp = client.get('/__ok', headers={'X-Request-ID': 'my-fixed-id-123'})
    assert resp.status_code == 200
    assert resp.headers.get('X-Request-ID') == 'my-fixed-id-123'


def test_request_id_generated_when_missing(client):
    resp = client.get('/__ok')
    assert len(resp.headers['X-Request-ID']) == 32


def test_logs_include_request_id_attribute(client, caplog):
    caplog.set_level('INFO')
    resp = client.get('/__log', headers={'X-Request-ID': 'rid-abc'})
    assert resp.status_code == 200
    assert any(getattr(r, 'request_id', '') == 'rid-abc' for r in caplog.records)


def test_context_filter_outside_request():
    record = _record('hello')
    RequestContextFilter().filter(record)
    assert record.request_id == 'n/a'
    assert record.user_id == 'n/a'


def test_context_filter_picks_up_user(app):
    with app.test_request_context('/'):
        g.request_id = 'rid-1'
        g.user_id = 42
        record = _record('hello')
        RequestContextFilter().filter(record)
    assert (record.request_id, record.user_id) == ('rid-1', '42')


def test_sensitive_fields_masked_in_info(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'testing')
    record = _record({'event': 'checkout', 'phone_number': '+250788', 'buyer': {'email': 'a@b.rw'}})
    MaskingFilter().filter(record)
    assert record.msg['phone_number'] == '[REDACTED]'
    assert record.msg['buyer']['email'] == '[REDACTED]'
    assert record.msg['event'] == 'checkout'


def test_sensitive_fields_visible_in_debug(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'development')
    record = _record({'password': 'secret'}, level=logging.DEBUG)
    MaskingFilter().filter(record)
    assert record.msg['password'] == 'secret'


def test_debug_masked_in_production(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'production')
    record = _record({'password': 'secret'}, level=logging.DEBUG)
    MaskingFilter().filter(record)
    assert record.msg['password'] == '[REDACTED]'


def test_json_formatter_merges_dict_messages():
    record = _record({'event': 'orders_placed', 'order_ids': [1, 2]})
    RequestContextFilter().filter(record)
    line = json.loads(JsonFormatter().format(record))
    assert line['event'] == 'orders_placed'
    assert line['order_ids'] == [1, 2]
    assert line['level'] == 'INFO'
    assert line['request_id'] == 'n/a'
