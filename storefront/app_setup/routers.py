"""
Registre central des routers.
- Catalogue: shirts, shoes
- Checkout: payment-sheet, success, webhook
- Health
"""
from fastapi import FastAPI
from storefront.catalog import views as catalog_views
from storefront.checkout import views as checkout_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l’application.
    L’authentification est assurée en amont par le middleware d’identité (hors de ce service).
    """
    app.include_router(catalog_views.shirts_router)
    app.include_router(catalog_views.shoes_router)
    app.include_router(checkout_views.router)
    app.include_router(health_router)
