from .auth import auth_bp
from .catalog import catalog_bp
from .consumer import consumer_bp
from .seller import seller_bp
from .profile import profile_bp
from .admin import admin_bp
from .storage import storage_bp


__all__ = [
    'auth_bp',
    'catalog_bp',
    'consumer_bp',
    'seller_bp',
    'profile_bp',
    'admin_bp',
    'storage_bp',
]
