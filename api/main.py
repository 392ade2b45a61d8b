import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core import db
from core.logging_config import configure_logging
from locations import router as locations_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, released on shutdown.
    async with db.connect() as database:
        app.state.db = database
        try:
            yield
        finally:
            app.state.db = None


app = FastAPI(lifespan=lifespan)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def invalid_input_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Bad JSON, unparsable ids and out-of-range fields are all client errors.
    logger.info("invalid_input method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input.", "errors": jsonable_errors(exc)},
    )


@app.exception_handler(db.StorageError)
async def storage_error_handler(request: Request, exc: db.StorageError) -> JSONResponse:
    logger.error(
        "storage_failure operation=%s method=%s path=%s",
        exc.operation,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error."},
    )


app.include_router(locations_router.router, tags=["locations"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "locations api"}
