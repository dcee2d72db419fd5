import logging
from dataclasses import dataclass, field
from typing import Mapping, Protocol

import httpx

from s3_upload_api.config import S3Config
from s3_upload_api.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestParams:
    """Everything needed to put one request on the wire, minus the body."""

    protocol: str
    host: str
    port: int | None
    path: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def url(self) -> str:
        if self.port is None:
            return f"{self.protocol}://{self.host}{self.path}"
        return f"{self.protocol}://{self.host}:{self.port}{self.path}"


@dataclass
class Response:
    status_code: int
    headers: Mapping[str, str]
    body: bytes = b""

    def header(self, name: str) -> str | None:
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None


class Transport(Protocol):
    def request(self, params: RequestParams, body: bytes | None = None) -> Response:
        ...


class HttpxTransport:
    """Transport backed by an httpx.Client."""

    def __init__(
        self, client: httpx.Client | None = None, s3_config: S3Config | None = None
    ) -> None:
        if client is None:
            client = _create_httpx_client(s3_config or S3Config())
        self.client = client

    def request(self, params: RequestParams, body: bytes | None = None) -> Response:
        logger.debug(f"{params.method} {params.url}")
        try:
            response = self.client.request(
                params.method,
                params.url,
                headers=params.headers,
                content=body,
            )
        except httpx.TransportError as e:
            raise TransportError(f"{params.method} {params.url} failed: {e}") from e
        return Response(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _create_httpx_client(s3_config: S3Config) -> httpx.Client:
    s3_config.resolve_defaults()
    if s3_config.verbose:
        print("Creating httpx transport")
    return httpx.Client(
        timeout=httpx.Timeout(
            float(s3_config.timeout_read or 0),
            connect=float(s3_config.timeout_connection or 0),
        ),
        limits=httpx.Limits(max_connections=s3_config.max_pool_connections),
    )


def create_transport(s3_config: S3Config | None = None) -> HttpxTransport:
    """Create and return the default HTTP transport."""
    return HttpxTransport(s3_config=s3_config)
