"""Main FastAPI application."""
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse
from contextlib import asynccontextmanager
import os

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.database import init_db
from app.api import admin, assistant, auth, cart, health, menu, orders


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging(settings.log_level)
    await init_db()
    yield


app = FastAPI(
    title="Steakhouse Ordering",
    description="Online ordering backend for a steakhouse menu",
    version="0.1.0",
    lifespan=lifespan,
)

# Include routers (must be before static file mounting to take precedence)
app.include_router(health.router, tags=["health"])
app.include_router(menu.router, tags=["menu"])
app.include_router(cart.router, tags=["cart"])
app.include_router(orders.router, tags=["orders"])
app.include_router(admin.router, tags=["admin"])
app.include_router(auth.router, tags=["auth"])
app.include_router(assistant.router, tags=["assistant"])

# Mount static files (for frontend)
static_dir = os.path.join(os.path.dirname(__file__), "static")
assets_dir = os.path.join(static_dir, "assets")
if os.path.exists(assets_dir):
    app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")


@app.get("/")
async def root():
    """Serve frontend index.html."""
    index_path = os.path.join(static_dir, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {
        "message": "Steakhouse Ordering API",
        "version": "0.1.0",
        "frontend": "Frontend not built.",
    }
