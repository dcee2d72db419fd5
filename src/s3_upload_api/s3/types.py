from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_DEFAULT_REGION = "us-east-1"
_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class S3Credentials:
    """Credentials for accessing S3."""

    access_key_id: str
    secret_access_key: str
    region_name: str = _DEFAULT_REGION
    session_token: str | None = None

    def __repr__(self) -> str:
        # never leak the secret into logs
        return f"S3Credentials(access_key_id={self.access_key_id[:4]}..., region_name={self.region_name!r})"


@dataclass(frozen=True)
class ConnectionParams:
    """Where requests go and who signs them."""

    host: str
    credentials: S3Credentials
    protocol: str = "https"
    port: int | None = None

    def __post_init__(self):
        if self.protocol not in _DEFAULT_PORTS:
            raise ValueError(f"Unknown protocol: {self.protocol}")

    @property
    def endpoint_url(self) -> str:
        if self.port is None or self.port == _DEFAULT_PORTS[self.protocol]:
            return f"{self.protocol}://{self.host}"
        return f"{self.protocol}://{self.host}:{self.port}"


@dataclass(frozen=True)
class UploadSession:
    """One in-progress multipart upload, as opened by the server."""

    bucket: str
    key: str
    content_type: str
    upload_id: str

    def to_json(self) -> dict:
        return {
            "bucket": self.bucket,
            "key": self.key,
            "content_type": self.content_type,
            "upload_id": self.upload_id,
        }

    @staticmethod
    def from_json(json_dict: dict) -> "UploadSession":
        return UploadSession(
            bucket=json_dict["bucket"],
            key=json_dict["key"],
            content_type=json_dict["content_type"],
            upload_id=json_dict["upload_id"],
        )


@dataclass
class S3UploadTarget:
    """Target information for S3 upload."""

    src_file: Path
    bucket_name: str
    s3_key: str
    content_type: str | None = None
    src_file_size: int | None = None


class MultiUploadResult(Enum):
    UPLOADED_FRESH = 1
    UPLOADED_RESUME = 2
