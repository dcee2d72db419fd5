import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import load_dotenv

from s3_upload_api.s3.types import ConnectionParams, S3Credentials

_MAX_CONNECTIONS = 10
_TIMEOUT_READ = 120
_TIMEOUT_CONNECT = 60

ENV_ENDPOINT_URL = "S3_ENDPOINT_URL"
ENV_ACCESS_KEY_ID = "S3_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "S3_SECRET_ACCESS_KEY"
ENV_REGION = "S3_REGION"


@dataclass
class S3Config:
    max_pool_connections: int | None = None
    timeout_connection: int | None = None
    timeout_read: int | None = None
    verbose: bool | None = None

    def resolve_defaults(self) -> None:
        self.max_pool_connections = self.max_pool_connections or _MAX_CONNECTIONS
        self.timeout_connection = self.timeout_connection or _TIMEOUT_CONNECT
        self.timeout_read = self.timeout_read or _TIMEOUT_READ
        self.verbose = self.verbose or False


def parse_endpoint_url(
    endpoint_url: str, credentials: S3Credentials, verbose: bool = False
) -> ConnectionParams:
    if not endpoint_url.startswith("http"):
        if verbose:
            warnings.warn(
                f"Endpoint URL is schema naive: {endpoint_url}, assuming HTTPS"
            )
        endpoint_url = f"https://{endpoint_url}"
    parts = urlsplit(endpoint_url)
    if not parts.hostname:
        raise ValueError(f"Invalid endpoint url: {endpoint_url}")
    return ConnectionParams(
        host=parts.hostname,
        port=parts.port,
        protocol=parts.scheme,
        credentials=credentials,
    )


def load_connection_params(
    env_path: Path | None = None, verbose: bool = False
) -> ConnectionParams | None:
    """Build ConnectionParams from the environment (and a .env file if present).

    Returns None when any of the required variables is missing.
    """
    if env_path is not None:
        load_dotenv(env_path)
    else:
        load_dotenv()
    endpoint_url = os.getenv(ENV_ENDPOINT_URL)
    access_key_id = os.getenv(ENV_ACCESS_KEY_ID)
    secret_access_key = os.getenv(ENV_SECRET_ACCESS_KEY)
    if not (endpoint_url and access_key_id and secret_access_key):
        return None
    credentials = S3Credentials(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        region_name=os.getenv(ENV_REGION) or "us-east-1",
    )
    return parse_endpoint_url(endpoint_url, credentials, verbose=verbose)
