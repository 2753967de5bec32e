from app.version import API_PREFIX

PRODUCTS = f"{API_PREFIX}/products"


def test_only_active_unexpired_products_are_listed(client, make_product):
    fresh = make_product(name='Fresh bread')
    make_product(name='Hidden', is_active=False)
    make_product(name='Expired', days=-1)

    data = client.get(PRODUCTS).get_json()
    assert [p['id'] for p in data['products']] == [fresh.id]
    assert data['products'][0]['seller']['business_name'] == 'fbo foods'


def test_filters_search_and_sort(client, make_product):
    make_product(name='Rye Bread', original='1000', discounted='700', days=3)
    make_product(name='Banana bread', original='1500', discounted='500', days=1)
    make_product(name='Milk', category='dairy', original='900', discounted='600', days=2)

    names = lambda resp: [p['name'] for p in resp.get_json()['products']]  # noqa: E731
    assert names(client.get(PRODUCTS, query_string={'search': 'BREAD', 'sort': 'price_low'})) == ['Banana bread', 'Rye Bread']
    assert names(client.get(PRODUCTS, query_string={'sort': 'price_high'})) == ['Rye Bread', 'Milk', 'Banana bread']
    assert names(client.get(PRODUCTS, query_string={'sort': 'expiry'})) == ['Banana bread', 'Milk', 'Rye Bread']
    assert names(client.get(PRODUCTS, query_string={'category': 'dairy'})) == ['Milk']
    assert names(client.get(PRODUCTS)) == ['Milk', 'Banana bread', 'Rye Bread']
    assert names(client.get(PRODUCTS, query_string={'category': 'furniture'})) == []


def test_categories(client, make_product):
    make_product(category='dairy', name='Milk')
    make_product(category='bakery')
    make_product(category='meat', name='Beef', is_active=False)
    assert client.get(f"{PRODUCTS}/categories").get_json()['categories'] == ['bakery', 'dairy']


def test_product_detail_with_related(client, make_product):
    main = make_product(name='Croissant')
    for i in range(5):
        make_product(name=f'Roll {i}')
    make_product(name='Yogurt', category='dairy')

    resp = client.get(f"{PRODUCTS}/{main.id}")
    assert resp.status_code == 200
    product = resp.get_json()['product']
    assert product['name'] == 'Croissant'
    assert 'business_address' in product['seller']
    assert len(product['related']) == 4
    assert all(r['category'] == 'bakery' and r['id'] != main.id for r in product['related'])


def test_inactive_product_detail_is_404(client, make_product):
    hidden = make_product(is_active=False)
    assert client.get(f"{PRODUCTS}/{hidden.id}").status_code == 404
    assert client.get(f"{PRODUCTS}/123456").status_code == 404
