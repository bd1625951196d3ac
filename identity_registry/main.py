import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from identity_registry.core.config import APP_ENV, API_VERSION, CORS_ORIGINS, LOG_LEVEL, PORT
from identity_registry.core.database import connect, disconnect
from identity_registry.core.exceptions import RegistryError
from identity_registry.routers.user_router import router as user_router
from identity_registry.utils import api_response

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting identity registry ({APP_ENV})...")
    connect()
    logger.info(f"API base path: /api/{API_VERSION}")

    yield

    disconnect()
    logger.info("Identity registry stopped")

app = FastAPI(title="Identity Registry", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=True,
)


@app.middleware("http")
async def request_logger(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.perf_counter()
    logger.info(f"Incoming request {request_id}: {request.method} {request.url.path}")

    response = await call_next(request)

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = request_id
    logger.info(
        f"Request completed {request_id}: {request.method} {request.url.path} "
        f"-> {response.status_code} in {duration_ms:.1f}ms"
    )
    return response


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    logger.warning(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=api_response.error(exc.message, exc.errors, kind=exc.kind, field=exc.field),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"] if p not in ("body", "path", "query")) or "body",
         "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=api_response.error("Validation failed", errors, kind="validation_error"),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=api_response.error(message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content=api_response.error("Internal server error"))


app.include_router(user_router)


@app.get("/")
def root():
    return {
        "status": "Identity Registry API is running"
    }


@app.get("/health")
def health():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("identity_registry.main:app", host="0.0.0.0", port=PORT)
