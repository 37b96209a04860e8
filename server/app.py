"""FastAPI application backing the workflow editor."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradeflow.config import load_settings
from server.engine_routes import router as engine_router
from server.event_routes import router as event_router
from server.runtime import get_runtime, reset_runtime, shutdown_runtime
from server.workflow_routes import router as workflow_router

VERSION = "0.1.0"

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared runtime on startup and stop the engine on shutdown."""
    reset_runtime(settings)
    yield
    shutdown_runtime()


app = FastAPI(
    title="TradeFlow API",
    description="Trigger/action workflow engine for simulated crypto trading",
    version=VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routes
app.include_router(workflow_router, prefix="/api")
app.include_router(engine_router, prefix="/api")
app.include_router(event_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    runtime = get_runtime()
    return {
        "status": "ok",
        "version": VERSION,
        "running": runtime.runner.is_running,
        "endpoints": {
            "workflow": "/api/workflow",
            "nodes": "/api/nodes",
            "edges": "/api/edges",
            "engine": "/api/engine",
            "events": "/api/events",
            "stats": "/api/stats",
            "catalog": "/api/catalog",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
