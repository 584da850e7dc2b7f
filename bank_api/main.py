"""
Bank API — FastAPI Application.

This is the entry point for the application.
All routers and error handlers are registered here.
"""

import uvicorn
from fastapi import FastAPI

from bank_api.config import get_settings
from bank_api.logging_config import setup_logging
from bank_api.api.errors import register_error_handlers
from bank_api.api.health import router as health_router
from bank_api.api.auth import router as auth_router
from bank_api.api.users import router as users_router
from bank_api.api.accounts import router as accounts_router
from bank_api.api.transactions import router as transactions_router

settings = get_settings()
setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Demo banking API with atomic funds transfers",
    debug=settings.DEBUG,
)

register_error_handlers(app)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(accounts_router)
app.include_router(transactions_router)


def main() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
