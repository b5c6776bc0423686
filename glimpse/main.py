"""Glimpse - FastAPI entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI

from .application import SessionStore, create_backend
from .infrastructure.auth import AuthProvider, LocalAuthProvider
from .infrastructure.documents import DocumentStore, get_document_store
from .infrastructure.storage import ObjectStorage, get_storage
from .logging_config import configure_logging
from .middleware import AuthMiddleware
from .navigation import AppShell, Navigator
from .screens import AlertPresenter

# Import routers
from .routes.auth import router as auth_router
from .routes.feed import router as feed_router
from .routes.albums import router as albums_router
from .routes.create import router as create_router
from .routes.viewer import router as viewer_router
from .routes.profile import router as profile_router
from .routes.media import router as media_router

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[DocumentStore] = None,
    storage: Optional[ObjectStorage] = None,
    auth_factory: Optional[Callable[[DocumentStore], AuthProvider]] = None,
    setup_logging: bool = True
) -> FastAPI:
    """Build the app.

    Args:
        store: Document store (default: GLIMPSE_DOCUMENT_BACKEND)
        storage: Object storage (default: STORAGE_BACKEND)
        auth_factory: Builds the identity provider over the store
        setup_logging: Install the stdout log handler on startup
    """
    store = store or get_document_store()
    storage = storage or get_storage()
    auth_factory = auth_factory or LocalAuthProvider

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if setup_logging:
            configure_logging()

        await store.open()
        backend = create_backend(store, storage)
        session = SessionStore(auth_factory(store), backend.users)
        navigator = Navigator()
        shell = AppShell(session, navigator)

        app.state.store = store
        app.state.storage = storage
        app.state.backend = backend
        app.state.session = session
        app.state.navigator = navigator
        app.state.alerts = AlertPresenter()
        app.state.shell = shell

        shell.start()
        await session.start()
        logger.info("Glimpse started (%s store)", type(store).__name__)
        yield

        shell.stop()
        await session.stop()
        await store.close()

    app = FastAPI(title="Glimpse", lifespan=lifespan)

    app.add_middleware(AuthMiddleware)

    app.include_router(auth_router)
    app.include_router(feed_router)
    app.include_router(albums_router)
    app.include_router(create_router)
    app.include_router(viewer_router)
    app.include_router(profile_router)
    app.include_router(media_router)

    return app


app = create_app()
