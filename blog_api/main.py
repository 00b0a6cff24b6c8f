"""
Blog Engagement API - FastAPI Application
Comments, replies, moderation and likes for blog posts
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.core.config import Settings, settings as default_settings
from blog_api.core.database import Database
from blog_api.core.exceptions import EngagementError
from blog_api.utils.responses import error_response

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to the {"ok": false, "error": ...} envelope"""

    @app.exception_handler(EngagementError)
    async def engagement_exception_handler(request: Request, exc: EngagementError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response(exc.message, detail=exc.detail, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [
            {
                "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return error_response(
            "Validation error",
            detail=fields,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around an explicit settings object and storage handle

    Args:
        settings: Settings to run with (defaults to environment settings)
        database: Storage handle (defaults to one built from DATABASE_URL)
    """
    settings = settings or default_settings
    configure_logging(settings)

    if database is None:
        database = Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.AUTO_CREATE_TABLES:
            database.create_all()
        logger.info(f"{settings.APP_NAME} started ({settings.APP_ENV})")
        yield
        database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Engagement API for blog posts: comments, moderation and likes",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    register_exception_handlers(app)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ORIGINS != "*",
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint - health check"""
        return {
            "ok": True,
            "message": f"Welcome to {settings.APP_NAME} API",
            "version": "1.0.0",
            "environment": settings.APP_ENV
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "environment": settings.APP_ENV
        }

    @app.get("/health/db", tags=["Health"])
    async def db_health_check():
        """Database connection health check"""
        result = {
            "backend": database.engine.dialect.name,
            "connection_test": False,
            "error": None
        }
        try:
            with database.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            result["connection_test"] = True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            result["error"] = str(e)
        return result

    # Import routers
    from blog_api.api import admin, comments, likes

    # Include routers
    app.include_router(comments.router, prefix=settings.API_PREFIX, tags=["Comments"])
    app.include_router(likes.router, prefix=settings.API_PREFIX, tags=["Likes"])
    app.include_router(admin.router, prefix=settings.API_PREFIX, tags=["Admin"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "blog_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG
    )
