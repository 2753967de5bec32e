from app.routes import (
    auth_bp,
    catalog_bp,
    consumer_bp,
    seller_bp,
    profile_bp,
    admin_bp,
    storage_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(consumer_bp)
    app.register_blueprint(seller_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(admin_bp)
    # Public object URLs live outside the versioned prefix
    app.register_blueprint(storage_bp)
