"""
Web3 Marketplace - Main FastAPI Application

Single entry point for the storefront API and the mini-app manifest.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.logging import get_logger
from marketplace.routers import (
    cart_router,
    manifest_router,
    orders_router,
    products_router,
    purchases_router,
    seller_router,
    session_router,
)
from marketplace.routers.deps import shutdown_services

logger = get_logger(__name__)


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    yield
    # Shutdown
    await shutdown_services()
    logger.info("Marketplace services shut down")


app = FastAPI(
    title="Web3 Marketplace",
    description="Single-seller cart storefront on the Monad testnet marketplace contract",
    version="1.0.0",
    lifespan=lifespan
)

# CORS for the mini-app frame
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(cart_router, prefix="/api")
app.include_router(purchases_router, prefix="/api")
app.include_router(seller_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(manifest_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "web3-marketplace"}
