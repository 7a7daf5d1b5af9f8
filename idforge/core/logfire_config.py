"""
Logfire Configuration Module

Centralized logfire configuration and FastAPI instrumentation for idforge.

Usage:
    from idforge.core.logfire_config import initialize_logfire

    results = initialize_logfire(app)  # idempotent; safe to call at startup
    # results: {"configured": bool, "instrumentation": {"fastapi": bool}}
"""

import logging
from typing import Any, Dict, Optional, Union

import logfire
from fastapi import FastAPI, Request, WebSocket

from idforge.core.config import settings
from idforge.core.logger import setup_logfire_handler


class _LogfireState:
    """Internal state management for logfire configuration."""

    def __init__(self) -> None:
        self.configured = False

    def is_configured(self) -> bool:
        return self.configured

    def set_configured(self, value: bool) -> None:
        self.configured = value


_state = _LogfireState()


def custom_request_attributes_mapper(
    request: Union[Request, WebSocket], attributes: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """
    Custom request attributes mapper for logfire.

    Validation errors are always kept; for successful requests only the
    endpoint, method, request id and the (non-sensitive) ID parameters are
    recorded.

    Args:
        request: The FastAPI request or WebSocket object
        attributes: Default attributes dictionary from logfire

    Returns:
        dict or None: Customized attributes dict
    """
    endpoint = (
        str(request.url.path)
        if hasattr(request, "url")
        else getattr(request, "path", "unknown")
    )
    method = getattr(request, "method", "WebSocket")
    request_id = (
        request.headers.get("x-request-id") if hasattr(request, "headers") else None
    )

    if attributes.get("errors"):
        return {
            "errors": attributes["errors"],
            "endpoint": endpoint,
            "method": method,
            "request_id": request_id,
        }

    filtered_values = {}
    for key, value in (attributes.get("values") or {}).items():
        if key.lower() in ["password", "token", "api_key", "secret"]:
            filtered_values[key] = "[REDACTED]"
        else:
            filtered_values[key] = value

    return {
        "values": filtered_values,
        "endpoint": endpoint,
        "method": method,
        "request_id": request_id,
    }


def setup_logfire() -> bool:
    """
    Set up basic logfire configuration.

    Returns:
        bool: True if logfire was successfully configured, False otherwise
    """
    logger = logging.getLogger("idforge.logfire")

    if not settings.logfire__enabled or _state.is_configured():
        return _state.is_configured()

    try:
        config_kwargs: Dict[str, Any] = {
            "service_name": settings.logfire__service_name,
            "environment": settings.logfire__environment,
        }

        if settings.logfire__disable_scrubbing:
            config_kwargs["scrubbing"] = False

        if settings.logfire__token:
            config_kwargs["token"] = settings.logfire__token.get_secret_value()

        logfire.configure(**config_kwargs)
        logging.getLogger("idforge.startup").info(
            "Logfire initialized for service: %s", settings.logfire__service_name
        )

        setup_logfire_handler()

        _state.set_configured(True)
        return True

    except Exception as e:
        logger.error("Failed to initialize logfire: %s", e)
        return False


def instrument_fastapi(app: FastAPI) -> bool:
    """
    Set up logfire instrumentation for FastAPI.

    Args:
        app: The FastAPI application instance

    Returns:
        bool: True if FastAPI was successfully instrumented, False otherwise
    """
    logger = logging.getLogger("idforge.logfire")

    if not settings.logfire__enabled or not settings.logfire__instrument__fastapi:
        return False

    try:
        logfire.instrument_fastapi(
            app,
            request_attributes_mapper=custom_request_attributes_mapper,
            capture_headers=True,
        )
        logger.info("FastAPI instrumented with logfire")
        return True

    except Exception as e:
        logger.error("Failed to instrument FastAPI with logfire: %s", e)
        return False


def initialize_logfire(app: Optional[FastAPI] = None) -> Dict[str, Any]:
    """
    Complete logfire initialization including configuration and instrumentation.

    Args:
        app: Optional FastAPI application instance for instrumentation

    Returns:
        dict: Initialization results with status for each component
    """
    results: Dict[str, Any] = {
        "configured": False,
        "instrumentation": {"fastapi": False},
    }

    results["configured"] = setup_logfire()

    if results["configured"] and app is not None:
        results["instrumentation"]["fastapi"] = instrument_fastapi(app)

    return results
