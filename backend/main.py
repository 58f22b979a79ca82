import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from core.limiter import limiter
from core.security import FirebaseTokenVerifier, init_firebase
from database import Store
from services.payment_service import StripeCheckout

# Routers
from routers import users, parcels, payments, riders, tracking

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    store = Store.connect(settings.MONGO_URL, settings.DB_NAME)
    try:
        await store.create_indexes()
    except Exception as e:
        logger.warning(f"Could not create indexes (non-blocking): {e}")
    init_firebase()

    app.state.store = store
    app.state.token_verifier = FirebaseTokenVerifier()
    app.state.payment_gateway = StripeCheckout(settings.STRIPE_SECRET, settings.STRIPE_API_BASE)
    logger.info("ZapShift API started")
    yield
    # Shutdown
    store.close()
    logger.info("ZapShift API stopped")


app = FastAPI(
    title="ZapShift API",
    description="Parcel delivery coordination: parcels, riders, payments, tracking",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else [*settings.CORS_ORIGINS, settings.SITE_DOMAIN],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ── Erreurs → {"message": ...} ───────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(parcels.router, prefix="/parcels", tags=["Parcels"])
app.include_router(payments.router, tags=["Payments"])
app.include_router(riders.router, prefix="/riders", tags=["Riders"])
app.include_router(tracking.router, prefix="/trackings", tags=["Tracking"])


@app.get("/", response_class=PlainTextResponse, tags=["Health"])
async def root():
    return "zap is shifting shifting!"


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "app": "zapshift", "version": "1.0.0"}
