import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from warehouse_payments.core.config import settings
from warehouse_payments.core.database import SessionLocal, init_db
from warehouse_payments.core.errors import InternalError, PaymentError
from warehouse_payments.routes.balance_payments import router as balance_payments_router
from warehouse_payments.routes.health import router as health_router
from warehouse_payments.services.seed import seed_demo


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def payment_error_handler(request: Request, exc: PaymentError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # Full detail stays in the server log; clients get the generic message
    logger.error("database error on %s %s", request.method, request.url.path, exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Warehouse Balance Payments API", version="0.1.0")

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(PaymentError, payment_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(balance_payments_router, prefix="/balance-payment", tags=["balance-payment"])

    return app


app = create_app()

force_seed = os.getenv("FORCE_SEED") == "true"

# Tables in dev/test; demo data only in development or when explicitly requested
if settings.env in {"dev", "test"} or force_seed:
    try:
        init_db()
        if settings.env == "dev" or force_seed:
            with SessionLocal() as db:
                seed_demo(db)
    except Exception:
        logger.exception("database startup failed")
