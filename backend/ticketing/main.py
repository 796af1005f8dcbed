"""
Point d'entrée principal de l'API du portail de support DepEd.
Démarrage : uvicorn ticketing.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import ticketing.models  # noqa: F401 (enregistre tous les modèles dans Base.metadata avant les routers)
from ticketing.config import settings
from ticketing.exceptions import PortalError
from ticketing.routers import (
    account_requests,
    auth,
    batches,
    device_types,
    idas_resets,
    issues,
    reset_requests,
    schools,
    tickets,
    transactions,
    uploads,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="Portail de support DepEd",
    description="Tickets de support, lots d'appareils et demandes de compte des écoles",
    version=VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(schools.router)
app.include_router(tickets.router)
app.include_router(batches.router)
app.include_router(issues.router)
app.include_router(device_types.router)
app.include_router(account_requests.router)
app.include_router(reset_requests.router)
app.include_router(idas_resets.router)
app.include_router(transactions.router)
app.include_router(uploads.router)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Erreurs métier : {"error": kind, "detail": message, ...extras}."""
    if exc.status_code >= 500:
        logger.error("%s %s : %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message, **exc.extras()},
        headers=exc.headers(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Dernier filet du portail : toute erreur imprévue devient une réponse 500 au format
    {"error": "InternalError", "detail": ...}, comme les erreurs métier.
    Le détail (erreurs SQL comprises) reste dans les logs, jamais dans la réponse.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "InternalError", "detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "DepEd Support Portal API", "version": VERSION}
