import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import sessionmaker

load_dotenv()

from arttrack import __version__
from arttrack.auth import set_session_cookie
from arttrack.background_jobs import scheduler as background_scheduler
from arttrack.database import SessionLocal, engine as default_engine, init_db, DATABASE_URL
from arttrack.routes import (
    auth_router,
    dashboard_router,
    commissions_router,
    types_router,
)
from arttrack.services.delete_confirm import DEFAULT_CONFIRM_SECONDS
from arttrack.services.errors import (
    AdminRequiredError,
    OwnershipError,
    PermissionDeniedError,
    StoreError,
)
from arttrack.services.identity import PasswordIdentityProvider
from arttrack.services.local_store import LocalCommissionStore, LocalStorage
from arttrack.services.store import CommissionStore, SqlCommissionStore
from arttrack.services.viewer_sessions import ViewerSessionRegistry
from arttrack.template_config import templates

logging.basicConfig(level=logging.DEBUG if os.getenv("DEBUG", "false").lower() == "true" else logging.INFO)
logger = logging.getLogger(__name__)


def create_store(session_factory, storage: LocalStorage) -> CommissionStore:
    """Pick the commission backend from ARTTRACK_BACKEND ("sql" or "local")."""
    backend = os.getenv("ARTTRACK_BACKEND", "sql").strip().lower()
    if backend == "local":
        logger.info("Using local file storage in %s", storage.directory)
        return LocalCommissionStore(storage)
    return SqlCommissionStore(session_factory)


def create_app(engine=None, store: CommissionStore = None, storage: LocalStorage = None,
               scheduler=background_scheduler) -> FastAPI:
    engine = engine or default_engine
    session_factory = (
        SessionLocal
        if engine is default_engine
        else sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )
    storage = storage or LocalStorage(os.getenv("ARTTRACK_STORAGE_DIR", "./storage"))
    store = store or create_store(session_factory, storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create missing tables and run the timer scheduler while serving.

        If initialization fails the server stops with a clear error message.
        """
        try:
            init_db(engine)
        except Exception as e:
            raise RuntimeError(
                f"Database initialization failed for {engine.url}: {e}"
            ) from e
        if scheduler is not None:
            scheduler.start()
        yield
        if scheduler is not None:
            scheduler.stop()

    app = FastAPI(
        title="ArtTrack",
        description="Commission progress tracking for illustrators",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(commissions_router)
    app.include_router(types_router)

    app.state.viewers = ViewerSessionRegistry(
        store=store,
        provider_factory=lambda: PasswordIdentityProvider(session_factory),
        storage=storage,
        scheduler=scheduler,
        confirm_seconds=float(os.getenv("DELETE_CONFIRM_SECONDS", DEFAULT_CONFIRM_SECONDS)),
    )

    @app.middleware("http")
    async def refresh_session_cookie(request: Request, call_next):
        """Keep the signed cookie in step with the viewer session it names."""
        response = await call_next(request)
        viewer = getattr(request.state, "viewer", None)
        if viewer is not None:
            identity = viewer.identity
            set_session_cookie(response, viewer.id, identity.user_id if identity else None)
        return response

    # Error handlers
    @app.exception_handler(PermissionDeniedError)
    async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
        """The backend refused access: show the setup instructions."""
        logger.error("Store permission denied: %s", exc.message)
        return templates.TemplateResponse(
            request, "errors/setup.html", {"message": exc.message}, status_code=403
        )

    @app.exception_handler(StoreError)
    async def load_failed_handler(request: Request, exc: StoreError):
        logger.error("Commission load failed: %s", exc.message)
        return templates.TemplateResponse(
            request, "errors/load_failed.html", {"message": exc.message}, status_code=503
        )

    @app.exception_handler(AdminRequiredError)
    async def admin_required_handler(request: Request, exc: AdminRequiredError):
        return RedirectResponse(url="/login", status_code=303)

    @app.exception_handler(OwnershipError)
    async def ownership_handler(request: Request, exc: OwnershipError):
        return templates.TemplateResponse(request, "errors/404.html", {}, status_code=404)

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        """Handle 404 errors."""
        return templates.TemplateResponse(request, "errors/404.html", {}, status_code=404)

    logger.info("ArtTrack app created (database %s)", DATABASE_URL if engine is default_engine else engine.url)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("arttrack.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
