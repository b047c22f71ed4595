"""
Central registry of allowed actions per role.
"""
ROLE_SCOPES = {
    "customer": {"browse_products", "manage_cart", "checkout", "view_orders"},
    "seller":   {"browse_products", "manage_products"},
}

def role_has_scope(role: str, action: str) -> bool:
    scopes = ROLE_SCOPES.get(role, set())
    return "*" in scopes or action in scopes
