"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_CORS_ALLOW_ORIGIN = "*"
DEFAULT_CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
DEFAULT_CORS_ALLOW_HEADERS = "Content-Type, x-drive-config, Authorization"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 60.0
DEFAULT_SERVICE_NAME = "InfiniCLOUD WebDAV Proxy"
DEFAULT_TARGET_NAME = "InfiniCLOUD / TeraCloud"


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    The proxy holds no secrets of its own: drive credentials travel with
    each request. Every field therefore has a default and can be
    overridden via environment variables.
    """

    cors_allow_origin: str = DEFAULT_CORS_ALLOW_ORIGIN
    cors_allow_methods: str = DEFAULT_CORS_ALLOW_METHODS
    cors_allow_headers: str = DEFAULT_CORS_ALLOW_HEADERS
    upstream_timeout_seconds: float = DEFAULT_UPSTREAM_TIMEOUT_SECONDS
    service_name: str = DEFAULT_SERVICE_NAME
    target_name: str = DEFAULT_TARGET_NAME

    def cors_headers(self) -> dict[str, str]:
        """Return the CORS headers attached to every HTTP response."""
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
        }


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Optional environment variables (with defaults):
        IP_CORS_ALLOW_ORIGIN: Value of Access-Control-Allow-Origin (default: *).
        IP_CORS_ALLOW_METHODS: Value of Access-Control-Allow-Methods.
        IP_CORS_ALLOW_HEADERS: Value of Access-Control-Allow-Headers.
        IP_UPSTREAM_TIMEOUT_SECONDS: Timeout for calls to the WebDAV server (default: 60).
        IP_SERVICE_NAME: Service name reported by the info endpoint.
        IP_TARGET_NAME: Upstream target reported by the info endpoint.

    Returns:
        Configured AppConfig instance.

    Raises:
        ValueError: If IP_UPSTREAM_TIMEOUT_SECONDS is not a positive number.
    """
    timeout = float(
        os.environ.get("IP_UPSTREAM_TIMEOUT_SECONDS", str(DEFAULT_UPSTREAM_TIMEOUT_SECONDS))
    )
    if timeout <= 0:
        raise ValueError(f"IP_UPSTREAM_TIMEOUT_SECONDS must be positive, got {timeout}")

    return AppConfig(
        cors_allow_origin=os.environ.get("IP_CORS_ALLOW_ORIGIN", DEFAULT_CORS_ALLOW_ORIGIN),
        cors_allow_methods=os.environ.get("IP_CORS_ALLOW_METHODS", DEFAULT_CORS_ALLOW_METHODS),
        cors_allow_headers=os.environ.get("IP_CORS_ALLOW_HEADERS", DEFAULT_CORS_ALLOW_HEADERS),
        upstream_timeout_seconds=timeout,
        service_name=os.environ.get("IP_SERVICE_NAME", DEFAULT_SERVICE_NAME),
        target_name=os.environ.get("IP_TARGET_NAME", DEFAULT_TARGET_NAME),
    )
