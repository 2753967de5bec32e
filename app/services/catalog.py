from datetime import datetime

from app.exceptions import NotFound
from models import db
from models.product import Product

SORTS = {
    "price_low": (Product.discounted_price.asc(),),
    "price_high": (Product.discounted_price.desc(),),
    "expiry": (Product.expiry_date.asc(),),
    "newest": (Product.created_at.desc(), Product.id.desc()),
}

RELATED_LIMIT = 4


def _today():
    return datetime.utcnow().date()


def listable_query():
    """Active products that have not expired yet."""
    return Product.query.filter(Product.is_active.is_(True), Product.expiry_date >= _today())


def list_products(category=None, search=None, sort=None):
    query = listable_query()
    if category:
        query = query.filter(Product.category == category)
    if search:
        query = query.filter(Product.name.ilike(f"%{search.strip()}%"))
    return query.order_by(*SORTS.get(sort or "newest", SORTS["newest"])).all()


def categories():
    rows = (
        db.session.query(Product.category)
        .filter(Product.is_active.is_(True), Product.expiry_date >= _today())
        .distinct()
        .order_by(Product.category.asc())
        .all()
    )
    return [r[0] for r in rows]


def get_listable(product_id) -> Product:
    product = db.session.get(Product, product_id)
    if not product or not product.is_listable(_today()):
        raise NotFound("Product not found")
    return product


def related_products(product: Product, limit=RELATED_LIMIT):
    return (
        listable_query()
        .filter(Product.category == product.category, Product.id != product.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .all()
    )


def product_detail(product_id) -> dict:
    product = get_listable(product_id)
    data = product.to_dict(with_seller=True)
    seller = product.seller
    if seller:
        data["seller"]["phone"] = seller.phone
        data["seller"]["business_address"] = seller.business_address
    data["related"] = [p.to_dict(with_seller=True) for p in related_products(product)]
    return data
