"""
Central registry of allowed actions per role.
"""
ROLE_SCOPES = {
    "consumer": {"checkout", "cancel_order", "manage_cart", "manage_favorites"},
    "fbo":      {"manage_products", "upload_images", "update_order_status", "cancel_order_seller"},
    "admin":    {"*"},
}

def role_has_scope(role: str, action: str) -> bool:
    scopes = ROLE_SCOPES.get(role, set())
    return "*" in scopes or action in scopes
