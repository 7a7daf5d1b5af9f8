"""
API Factory

Centralized API setup with middleware, CORS, and monitoring configuration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from idforge.api.errors import register_exception_handlers
from idforge.api.middleware import RequestIDMiddleware, RequestLoggingMiddleware
from idforge.api.router import router
from idforge.core.config import settings
from idforge.core.logger import get_logger

logger = get_logger(__name__)


def setup_cors(app: FastAPI) -> None:
    """
    Setup CORS middleware with configurable origins.

    Args:
        app: FastAPI application instance
    """
    cors_origins = settings.cors_allow_origins_list

    if cors_origins and cors_origins != [""]:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=settings.cors__allow_credentials,
            allow_methods=settings.cors_allow_methods_list,
            allow_headers=settings.cors_allow_headers_list,
        )
        logger.info("CORS middleware configured for origins: %s", cors_origins)
    else:
        logger.info("CORS middleware skipped (no origins configured)")


def setup_compression(app: FastAPI) -> None:
    """
    Setup response compression middleware.

    Args:
        app: FastAPI application instance
    """
    # Batch responses can be large; small single-ID responses stay uncompressed
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    logger.info("GZip compression middleware configured")


def setup_logging_middleware(app: FastAPI) -> None:
    """
    Setup request logging and ID middleware.

    Args:
        app: FastAPI application instance
    """
    # Last added runs first: the request ID must exist before logging reads it
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    logger.info("Request logging and ID middleware configured")


def setup_logfire_instrumentation(app: FastAPI) -> None:
    """
    Setup Logfire configuration and FastAPI instrumentation.

    Args:
        app: FastAPI application instance
    """
    try:
        from idforge.core.logfire_config import initialize_logfire

        results = initialize_logfire(app)

        if results["configured"]:
            logger.info(
                "Logfire initialized (fastapi instrumentation: %s)",
                results["instrumentation"]["fastapi"],
            )
        else:
            logger.debug("Logfire initialization skipped (disabled or not available)")

    except ImportError:
        logger.debug("Logfire not available for instrumentation")
    except Exception as e:
        logger.warning("Failed to initialize Logfire: %s", e)


def create_api(
    title: str = "idforge API",
    description: str = "Snowflake ID issuing service",
    version: str = "1.0.0",
    docs_url: str = "/docs",
    redoc_url: str = "/redoc",
    enable_cors: bool = True,
    enable_compression: bool = True,
) -> FastAPI:
    """
    Create the FastAPI application with middleware, error handlers and the
    versioned router.

    Args:
        title: API title
        description: API description
        version: API version
        docs_url: URL path for API documentation (Swagger UI)
        redoc_url: URL path for ReDoc documentation
        enable_cors: Whether to enable CORS middleware
        enable_compression: Whether to enable GZip compression

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url=docs_url,
        redoc_url=redoc_url,
        debug=settings.debug,
    )

    if enable_compression:
        setup_compression(app)
    if enable_cors:
        setup_cors(app)
    setup_logging_middleware(app)

    register_exception_handlers(app)
    logger.info("Global exception handlers configured")

    setup_logfire_instrumentation(app)

    app.include_router(router)

    logger.info("API factory created: %s v%s", title, version)
    return app
