from app.exceptions import NotFound
from models import db
from models.favorite import Favorite
from models.product import Product


def toggle(user_id: int, product_id) -> bool:
    """Add or remove the favorite. Returns the new membership. Does NOT commit."""
    fav = Favorite.query.filter_by(user_id=user_id, product_id=product_id).first()
    if fav:
        db.session.delete(fav)
        return False
    product = db.session.get(Product, product_id) if product_id is not None else None
    if not product or not product.is_active:
        raise NotFound("Product not found")
    db.session.add(Favorite(user_id=user_id, product_id=product.id))
    return True


def remove(user_id: int, product_id) -> bool:
    return Favorite.query.filter_by(user_id=user_id, product_id=product_id).delete() > 0


def list_for(user_id: int):
    return (
        Favorite.query.filter_by(user_id=user_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .all()
    )


def count(user_id: int) -> int:
    return Favorite.query.filter_by(user_id=user_id).count()
