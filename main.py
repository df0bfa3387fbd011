import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from config import Settings
from context import AppContext, build_context
from exceptions import register_exception_handlers
from routes.bookmarks import router as bookmarks_router
from routes.follows import router as follows_router
from routes.posts import router as posts_router
from routes.users import router as users_router

logger = logging.getLogger(__name__)


def create_app(
        settings: Optional[Settings] = None,
        context_factory: Callable[[Settings], AppContext] = build_context,
) -> FastAPI:
    settings = settings or Settings.from_env()

    logging.basicConfig(level=settings.log_level,
                        format="%(levelname)s: %(message)s")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Initialize dependencies
        context = context_factory(settings)
        app.state.context = context
        logger.info("Social feed API started")

        yield
        # Cleanup resources
        context.close()

    app = FastAPI(lifespan=lifespan)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(posts_router, prefix="/api", tags=["posts"])
    app.include_router(users_router, prefix="/api", tags=["users"])
    app.include_router(bookmarks_router, prefix="/api/users", tags=["bookmarks"])
    app.include_router(follows_router, prefix="/api/users", tags=["follows"])

    return app


app = create_app()
