"""
ZeroBuild AI Design Suite – FastAPI Backend

Main entry point. Sets up logging and CORS, wires the record store,
generation gateway and authenticator onto app state, includes all routes.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import ACCOUNTS_JSON, CORS_ORIGINS, DATABASE_URL, LOG_LEVEL
from services.auth import SessionRegistry, StaticAccountAuthenticator, load_accounts
from services.grok_gateway import get_gateway
from services.inflight import InFlightRegistry
from services.record_store import RecordStore

# Import route modules
from routes.auth import router as auth_router
from routes.geometry import router as geometry_router
from routes.projects import router as projects_router
from routes.rooms import router as rooms_router
from routes.lookup import router as lookup_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build app-scoped services on startup, dispose the store on shutdown."""
    store = RecordStore(DATABASE_URL)
    await store.init()
    app.state.record_store = store
    app.state.gateway = get_gateway()
    app.state.registry = InFlightRegistry()
    app.state.sessions = SessionRegistry()
    app.state.authenticator = StaticAccountAuthenticator(load_accounts(ACCOUNTS_JSON))
    logger.info(f"ZeroBuild backend ready (gateway={app.state.gateway.name})")
    yield
    await store.close()


app = FastAPI(
    title="ZeroBuild AI Design Suite",
    description="Generate building and room designs with renders, analysis and budgets",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(geometry_router)
app.include_router(projects_router)
app.include_router(rooms_router)
app.include_router(lookup_router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    gateway = getattr(app.state, "gateway", None)
    return {"status": "ok", "version": "1.0.0", "gateway": gateway.name if gateway else None}


if __name__ == "__main__":
    import uvicorn
    from config import HOST, PORT
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
