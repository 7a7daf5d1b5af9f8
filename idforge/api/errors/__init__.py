"""
API Error Handling

Maps idforge exceptions, HTTP errors and request validation errors to the
standard error response.
"""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from idforge.core.exceptions import ApplicationException

from .exception_handlers import global_exception_handler


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the global handler for every exception type the API can raise.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApplicationException, global_exception_handler)
    app.add_exception_handler(HTTPException, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)


__all__ = ["global_exception_handler", "register_exception_handlers"]
