"""HTTP trigger blueprint: service info and health check endpoints."""

import logging

import azure.functions as func

from infinicloud_proxy import __version__
from infinicloud_proxy.config import load_config
from infinicloud_proxy.functions.responses import json_response

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.route(route="info", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def service_info(req: func.HttpRequest) -> func.HttpResponse:
    """Describe the proxy and the upstream it targets."""
    logger.info("[service_info] service info requested")

    config = load_config()
    body = {
        "status": "ok",
        "service": config.service_name,
        "target": config.target_name,
        "version": __version__,
    }
    return json_response(body, config)


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Liveness probe. Does not contact the WebDAV server."""
    logger.info("[health_check] health check requested")

    return json_response({"status": "healthy"}, load_config())
