import base64
import hashlib
from urllib.parse import quote


def uri_resource_escape(resource: str) -> str:
    """Percent-encode an object key for use in a request path, keeping '/'."""
    return quote(resource, safe="/")


def object_path(bucket: str, key: str) -> str:
    return f"/{bucket}/{uri_resource_escape(key)}"


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest().lower()


def md5_base64(data: bytes) -> str:
    return base64.b64encode(hashlib.md5(data).digest()).decode("ascii")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest().lower()
