"""
Gestionnaires d’exceptions: toutes les erreurs sont rattrapées à la frontière HTTP.
- HTTPException -> {"error": detail} avec le code d’origine
- RequestValidationError (query/path FastAPI) -> 400 {"error": {champ: [messages]}}
- Toute autre exception -> journalisée, 500 {"error": "Internal Server Error"}
"""
import logging
from typing import Dict, List
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

def request_field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Aplatit les erreurs FastAPI en {champ: [messages]} (sans le préfixe query/path/body)."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc") or ()]
        if loc and loc[0] in ("query", "path", "body"):
            loc = loc[1:]
        errors.setdefault(".".join(loc) or "body", []).append(err.get("msg") or "invalide")
    return errors

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": request_field_errors(exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
