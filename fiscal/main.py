"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from fiscal.config import settings
from fiscal.database import Base, SessionLocal, engine
from fiscal.errors import FiscalHTTPException, fiscal_http_handler, validation_error_handler
from fiscal.routers import accounts, budgets, categories, goals, health, transactions, users
from fiscal.seed import seed_defaults

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if settings.seed_system_categories:
        db = SessionLocal()
        try:
            seed_defaults(db)
        finally:
            db.close()
    logger.info("fiscal started (db=%s)", settings.db_path)
    yield


app = FastAPI(
    title="Fiscal – Personal Finance API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_exception_handler(FiscalHTTPException, fiscal_http_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(ValidationError, validation_error_handler)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(accounts.router)
app.include_router(categories.router)
app.include_router(transactions.router)
app.include_router(budgets.router)
app.include_router(goals.router)
