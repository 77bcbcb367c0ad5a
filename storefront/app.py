# module storefront.app
from fastapi import FastAPI

from storefront.app_setup.middlewares import register_basic_middlewares
from storefront.app_setup.exception_handlers import register_exception_handlers
from storefront.app_setup.routers import register_routers
from storefront.app_setup.lifespan import lifespan as app_lifespan

def create_app() -> FastAPI:
    """
    Crée et configure l’instance FastAPI de l’application.
    Étapes:
      1) register_basic_middlewares: CORS, TrustedHost, ProxyHeaders.
      2) register_exception_handlers: réponses JSON {"error": ...} pour toutes les erreurs.
      3) register_routers: catalogue, checkout, health.
    Retourne:
      - FastAPI: l’application prête à être servie (ASGI).
    """
    app = FastAPI(title="Storefront API", lifespan=app_lifespan)
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routers(app)
    return app

# App globale
app = create_app()
