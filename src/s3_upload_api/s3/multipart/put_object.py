import logging
from typing import BinaryIO

from s3_upload_api.errors import ProtocolError, SizeMismatchError
from s3_upload_api.s3.connection import S3Connection
from s3_upload_api.util import md5_base64, object_path, sha256_hex

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _read_all(data: bytes | BinaryIO) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    # errors raised by the stream propagate as-is
    return data.read()


def do_put_object(
    conn: S3Connection,
    bucket: str,
    key: str,
    content_type: str | None,
    size: int,
    upload_id: str | None,
    part_number: int | None,
    data: bytes | BinaryIO,
) -> str:
    """PUT one buffer and return the ETag the server assigned to it.

    With a part number this uploads a part of upload_id, without one it is a
    plain single-shot object PUT.
    """
    query = ""
    if part_number:
        query = f"?partNumber={part_number}&uploadId={upload_id}"
    if not content_type:
        content_type = DEFAULT_CONTENT_TYPE

    payload = _read_all(data)
    if len(payload) != size:
        raise SizeMismatchError(
            f"actual size {len(payload)} does not match specified size {size}"
        )

    headers = {
        "Content-Length": str(size),
        "Content-Type": content_type,
        "Content-MD5": md5_base64(payload),
    }
    if part_number:
        logger.info(f"Uploading part {part_number} of {bucket}/{key}, size {size}")
    else:
        logger.info(f"Uploading {bucket}/{key}, size {size}")
    response = conn.execute(
        method="PUT",
        path=f"{object_path(bucket, key)}{query}",
        headers=headers,
        body=payload,
        payload_hash=sha256_hex(payload),
    )
    etag = response.header("ETag")
    if etag is None:
        raise ProtocolError(f"no ETag in response for part {part_number} of {key}")
    return etag


def put_object(
    conn: S3Connection,
    bucket: str,
    key: str,
    data: bytes,
    content_type: str | None = None,
) -> str:
    """Upload a whole object in one request."""
    return do_put_object(
        conn,
        bucket=bucket,
        key=key,
        content_type=content_type,
        size=len(data),
        upload_id=None,
        part_number=None,
        data=data,
    )
