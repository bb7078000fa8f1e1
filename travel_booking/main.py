import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import settings
from .exceptions import AuthenticationFailed, Conflict, InvalidInput, NotFound, TravelBookingError
from .routers import auth_router, booking_router, catalog_router, transaction_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Setup logger
logger = logging.getLogger("booking_service")

ERROR_STATUS = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    Conflict: status.HTTP_400_BAD_REQUEST,
    AuthenticationFailed: status.HTTP_401_UNAUTHORIZED,
    NotFound: status.HTTP_404_NOT_FOUND,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Travel booking service starting up...")
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"Data directory: {settings.DATA_DIR.resolve()}, uploads: {settings.UPLOAD_DIR.resolve()}")

    yield  # The application is now running

    logger.info("Travel booking service shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Bookings, payment verification and catalog for a travel agency.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TravelBookingError)
async def handle_service_error(request: Request, exc: TravelBookingError):
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return JSONResponse(status_code=status_code, content={"message": exc.message, **exc.extra})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": f"Invalid request: {fields}"},
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


app.include_router(booking_router.router)
app.include_router(transaction_router.router)
app.include_router(auth_router.router)
app.include_router(catalog_router.router)

app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Travel Booking API"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)
