# API Routes Package
from app.api.routes import auth, settings, crm, inventory, sales, purchases, hr, accounting, dashboard

__all__ = [
    'auth',
    'settings',
    'crm',
    'inventory',
    'sales',
    'purchases',
    'hr',
    'accounting',
    'dashboard',
]
