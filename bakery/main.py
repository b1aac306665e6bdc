"""
Bakery Back Office - Backend API

Products, customers and markets over HTTP.
Run with: uvicorn bakery.main:app --reload
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from bakery.api import customers, markets, products  # noqa: E402
from bakery.api.responses import ApiError, api_error_handler  # noqa: E402
from bakery.core.config import settings  # noqa: E402
from bakery.core.database import engine, init_models  # noqa: E402

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models(engine)
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)

# Include API routers
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(customers.router, prefix="/api/v1/customers", tags=["Customers"])
app.include_router(markets.router, prefix="/api/v1/markets", tags=["Markets"])


@app.get("/")
async def root():
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
async def health():
    """Health check - tests database connectivity"""
    start_time = time.time()
    db_status = "unknown"
    db_error = None

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error(f"Health check database error: {e}")
        db_status = "disconnected"
        db_error = str(e)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "bakery-api",
        "version": settings.API_VERSION,
        "database": {"status": db_status, "error": db_error},
        "total_latency_ms": round((time.time() - start_time) * 1000, 2),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bakery.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_DEBUG)
