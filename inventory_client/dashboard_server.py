"""FastAPI dashboard server exposing the cached inventory views as JSON.

The server holds one ``InventoryService`` for its lifetime, so every
request is answered from the freshness cache when possible. A 401 from
the backend clears the session and redirects the caller to the login path.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from .services.inventory_service import InventoryService
from .utils.config import get_config
from .utils.exceptions import ApiError, AuthenticationError, SessionExpiredError
from .utils.logger import get_api_logger

config = get_config()
logger = get_api_logger()


class LoginRequest(BaseModel):
    email: str
    password: str


# ------------------------------------------------------------------
# Lifespan
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the inventory session and the periodic refresh job."""
    logger.info("=" * 60)
    logger.info("Inventory Dashboard Server Starting")
    logger.info(f"Environment:   {config.env.environment}")
    logger.info(f"Backend:       {config.env.api_base_url}")
    logger.info("=" * 60)

    owns_service = getattr(app.state, "inventory", None) is None
    if owns_service:
        app.state.inventory = InventoryService()

    interval = config.refresh.periodic_interval_minutes
    if interval > 0:
        app.state.inventory.scheduler.add_periodic(
            "refresh_all", app.state.inventory.refresh_all, interval
        )

    yield

    if owns_service:
        app.state.inventory.close()
        app.state.inventory = None
    logger.info("Dashboard server shut down.")


app = FastAPI(
    title="Inventory Dashboard Server",
    description="Cached warehouse, store and forecast views",
    version="1.0.0",
    lifespan=lifespan,
)


def _inventory(request: Request) -> InventoryService:
    return request.app.state.inventory


def _view(data, service) -> dict:
    return {"data": data, "error": service.error}


@app.get("/")
async def root():
    return {
        "service": "Inventory Dashboard Server",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health_check(request: Request):
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config.env.environment,
        "authenticated": _inventory(request).auth.check_auth()
    }


# ------------------------------------------------------------------
# Session
# ------------------------------------------------------------------

@app.get(config.auth.login_path)
async def login_required():
    return JSONResponse(
        status_code=401,
        content={"error": "Login required", "login": "POST /api/auth/login"}
    )


@app.post("/api/auth/login")
def login(body: LoginRequest, request: Request):
    _inventory(request).auth.login(body.email, body.password)
    return {"status": "authenticated"}


@app.post("/api/auth/logout")
def logout(request: Request):
    _inventory(request).auth.logout()
    return {"status": "logged_out"}


# ------------------------------------------------------------------
# Views
# ------------------------------------------------------------------

@app.get("/api/dashboard/stats")
def dashboard_stats(request: Request):
    dashboard = _inventory(request).dashboard
    return _view(dashboard.fetch_stats().to_dict(), dashboard)


@app.get("/api/warehouse/items")
def warehouse_items(request: Request, expiring: bool = False):
    warehouse = _inventory(request).warehouse
    if expiring:
        items = warehouse.fetch_expiring_items()
    else:
        items = warehouse.fetch_items()
    return _view([item.to_dict() for item in items], warehouse)


@app.get("/api/store/items")
def store_items(request: Request, status: str = "active"):
    store = _inventory(request).store
    fetchers = {
        "active": store.fetch_active_items,
        "expired": store.fetch_expired_items,
        "removed": store.fetch_removed_items,
    }
    if status not in fetchers:
        return JSONResponse(status_code=400, content={"error": f"Unknown status: {status}"})
    items = fetchers[status]()
    return _view([item.to_dict() for item in items], store)


@app.get("/api/store/reports")
def store_reports(request: Request):
    store = _inventory(request).store
    reports = store.fetch_reports()
    return _view(reports.to_dict() if reports else None, store)


# ------------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------------

@app.exception_handler(SessionExpiredError)
async def session_expired_handler(request: Request, exc: SessionExpiredError):
    logger.warning(f"Session expired on {request.url.path}, redirecting to login")
    return RedirectResponse(url=config.auth.login_path, status_code=307)


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"error": exc.message})


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    logger.warning(f"Backend error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=502,
        content={"error": exc.message, "backend_status": exc.status_code}
    )


def main():
    import uvicorn

    uvicorn.run(
        "inventory_client.dashboard_server:app",
        host="0.0.0.0",
        port=config.env.port,
        reload=not config.is_production
    )


if __name__ == "__main__":
    main()
