"""JSON and CORS response helpers shared by the HTTP blueprints."""

from __future__ import annotations

import json
from typing import Any

import azure.functions as func

from infinicloud_proxy.config import AppConfig

JSON_MIMETYPE = "application/json"


def json_response(body: Any, config: AppConfig, status_code: int = 200) -> func.HttpResponse:
    """Serialize ``body`` as JSON with CORS headers attached."""
    return func.HttpResponse(
        json.dumps(body, ensure_ascii=False),
        status_code=status_code,
        mimetype=JSON_MIMETYPE,
        charset="utf-8",
        headers=config.cors_headers(),
    )


def error_response(message: str, config: AppConfig, status_code: int) -> func.HttpResponse:
    """Return ``{"error": message}`` with the given status code."""
    return json_response({"error": message}, config, status_code=status_code)


def preflight_response(config: AppConfig) -> func.HttpResponse:
    """Answer a CORS preflight (OPTIONS) request."""
    return func.HttpResponse(status_code=204, headers=config.cors_headers())
