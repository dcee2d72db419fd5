import logging

from s3_upload_api.s3.connection import S3Connection
from s3_upload_api.s3.types import UploadSession
from s3_upload_api.s3.xml_parsers import parse_upload_id
from s3_upload_api.util import object_path

logger = logging.getLogger(__name__)


def initiate_new_multipart_upload(
    conn: S3Connection, bucket: str, key: str, content_type: str
) -> UploadSession:
    """Open a multipart upload for bucket/key and return its session."""
    logger.info(f"Creating multipart upload for {bucket}/{key}")
    response = conn.execute(
        method="POST",
        path=f"{object_path(bucket, key)}?uploads",
        headers={"Content-Type": content_type},
    )
    upload_id = parse_upload_id(response.body)
    logger.debug(f"Upload id for {bucket}/{key}: {upload_id}")
    return UploadSession(
        bucket=bucket, key=key, content_type=content_type, upload_id=upload_id
    )
