"""
Bank Services Administration: FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bank_admin.config import get_settings
from bank_admin.errors import BankAdminError
from bank_admin.logging_config import setup_logging
from bank_admin.api.health import router as health_router
from bank_admin.api.clients import router as clients_router
from bank_admin.api.accounts import router as accounts_router
from bank_admin.api.cards import router as cards_router
from bank_admin.api.payments import router as payments_router
from bank_admin.api.transfers import router as transfers_router
from bank_admin.api.users import router as users_router
from bank_admin.api.audit import router as audit_router

# Configure logging before creating the app
setup_logging()
logger = logging.getLogger("bank_admin.main")

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Administration API for clients, accounts, cards, payments and transfers",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BankAdminError)
async def bank_admin_error_handler(request: Request, exc: BankAdminError):
    """Render every domain error with the same tagged shape."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.kind.value,
            "message": exc.message,
        },
    )


# Register routers
app.include_router(health_router)
for router in (
    clients_router,
    accounts_router,
    cards_router,
    payments_router,
    transfers_router,
    users_router,
    audit_router,
):
    app.include_router(router, prefix="/api")

logger.info(
    "%s %s started (environment=%s)",
    settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT,
)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "bank_admin.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
