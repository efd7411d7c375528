from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.environment import environment, frontend_url, is_production
from config.logger import setup_logging
from controllers.auth import router as AuthRouter
from controllers.favorites import router as FavoritesRouter
from controllers.posts import router as PostsRouter
from controllers.products import router as ProductsRouter
from database import Database
from errors import DressifyError, DuplicateKey, InvalidParameter, ServerError, ValidationFailed, field_errors

API_VERSION = "1.0.0"

# CORS Configuration: any local dev server port, plus the deployed frontend
LOCAL_ORIGIN_REGEX = r"^http://(localhost|127\.0\.0\.1):\d+$"


def _error_response(error: DressifyError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_dressify_error(request: Request, error: DressifyError):
    if error.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {error.message}")
    else:
        logger.debug(f"{request.method} {request.url.path} -> {error.status_code} {error.message}")
    return _error_response(error)


async def handle_request_validation(request: Request, error: RequestValidationError):
    errors = error.errors()
    if errors and all(e.get("loc", ("",))[0] in ("query", "path") for e in errors):
        return _error_response(InvalidParameter(errors=field_errors(errors)))
    return _error_response(ValidationFailed(errors=field_errors(errors)))


def _is_unique_violation(error: IntegrityError) -> bool:
    text = str(error.orig).lower()
    return "unique" in text or "duplicate" in text


async def handle_integrity_error(request: Request, error: IntegrityError):
    logger.warning(f"{request.method} {request.url.path} violated a constraint: {error.orig}")
    if _is_unique_violation(error):
        return _error_response(DuplicateKey("Resource already exists"))
    # foreign key, check and not-null failures
    return _error_response(ValidationFailed("Invalid reference or value"))


async def handle_http_exception(request: Request, error: StarletteHTTPException):
    if error.status_code == 404:
        message = "API endpoint not found"
    else:
        message = str(error.detail)
    return JSONResponse(
        status_code=error.status_code,
        content={"success": False, "message": message},
        headers=getattr(error, "headers", None),
    )


async def handle_unexpected_error(request: Request, error: Exception):
    logger.opt(exception=error).error(f"Unhandled error on {request.method} {request.url.path}")
    message = "Internal server error" if is_production() else str(error) or "Internal server error"
    return _error_response(ServerError(message))


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the API around ``database`` (a new one from DATABASE_URL when omitted)."""
    setup_logging()
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database.create_all()
        logger.info(f"Dressify API started ({environment})")
        yield
        app.state.database.dispose()
        logger.info("Database connection closed")

    app = FastAPI(
        title="Dressify API",
        description="Fashion store API: products, favorites, blog posts and authentication",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.database = database

    origins = [frontend_url] if frontend_url else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=LOCAL_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(DressifyError, handle_dressify_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(AuthRouter, prefix="/api/auth", tags=["Auth"])
    app.include_router(ProductsRouter, prefix="/api/products", tags=["Products"])
    app.include_router(FavoritesRouter, prefix="/api/favorites", tags=["Favorites"])
    app.include_router(PostsRouter, prefix="/api/posts", tags=["Posts"])

    @app.get('/')
    def home():
        return {
            'success': True,
            'message': 'Welcome to Dressify API',
            'version': API_VERSION,
            'endpoints': {
                'auth': '/api/auth',
                'posts': '/api/posts',
                'products': '/api/products',
                'favorites': '/api/favorites',
                'health': '/api/health',
                'test': '/api/test',
            },
        }

    @app.get('/api/health')
    def health():
        return {
            'success': True,
            'message': 'Dressify API is running!',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'environment': environment,
        }

    @app.get('/api/test')
    def connection_test():
        return {
            'success': True,
            'message': 'Backend connection successful!',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'cors': 'enabled',
        }

    return app


app = create_app()
