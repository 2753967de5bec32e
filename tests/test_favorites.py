from app.version import API_PREFIX
from models.favorite import Favorite

FAV = f"{API_PREFIX}/consumer/favorites"


def test_toggle_adds_then_removes(client, auth_headers, make_product):
    hdr = auth_headers('consumer')
    bread = make_product()

    resp = client.post(f"{FAV}/toggle", json={'product_id': bread.id}, headers=hdr)
    assert resp.status_code == 200
    assert resp.get_json()['is_favorite'] is True
    listed = client.get(FAV, headers=hdr).get_json()['favorites']
    assert [f['product']['id'] for f in listed] == [bread.id]

    resp = client.post(f"{FAV}/toggle", json={'product_id': bread.id}, headers=hdr)
    assert resp.get_json()['is_favorite'] is False
    assert Favorite.query.count() == 0


def test_remove_favorite(client, auth_headers, make_product):
    hdr = auth_headers('consumer')
    bread = make_product()
    client.post(f"{FAV}/toggle", json={'product_id': bread.id}, headers=hdr)
    assert client.post(f"{FAV}/remove", json={'product_id': bread.id}, headers=hdr).status_code == 200
    assert client.post(f"{FAV}/remove", json={'product_id': bread.id}, headers=hdr).status_code == 404


def test_cannot_favorite_missing_product(client, auth_headers):
    resp = client.post(f"{FAV}/toggle", json={'product_id': 4242}, headers=auth_headers('consumer'))
    assert resp.status_code == 404


def test_favorites_require_consumer_role(client, auth_headers):
    assert client.get(FAV, headers=auth_headers('fbo')).status_code == 403
    assert client.get(FAV).status_code == 401
