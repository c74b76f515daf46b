"""
SIX EYES Backend - FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import config, history, optimize
from services.config_manager import ConfigManager
from services.history_store import HistoryStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    # Startup: Initialize singleton services
    print("[Backend] Starting SIX EYES Backend...")
    config_manager = ConfigManager.get_instance()
    print(f"[Backend] ConfigManager initialized ({config_manager.config_dir})")

    store = HistoryStore.get_instance()
    print(f"[Backend] HistoryStore loaded {len(store.list_entries())}/{store.max_entries} entries")

    yield
    print("[Backend] Shutting down SIX EYES Backend...")


def create_app() -> FastAPI:
    app = FastAPI(
        title="SIX EYES Backend",
        description="AI-assisted code optimization demo backend",
        version="1.0.0",
        lifespan=lifespan,
    )

    # The marketing site calls the API straight from the browser
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    app.include_router(optimize.router, prefix="/api/optimize", tags=["optimize"])
    app.include_router(history.router, prefix="/api/history", tags=["history"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "six-eyes-backend"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get_config().get("server", {})
    uvicorn.run(app, host=server.get("host", "0.0.0.0"), port=int(server.get("port", 8000)))
