import logging

from s3_upload_api.s3.connection import S3Connection
from s3_upload_api.s3.multipart.uploaded_part import UploadedPart
from s3_upload_api.s3.types import UploadSession
from s3_upload_api.s3.xml_parsers import parse_list_parts
from s3_upload_api.util import object_path

logger = logging.getLogger(__name__)


def list_parts(conn: S3Connection, session: UploadSession) -> list[UploadedPart]:
    """Fetch every part the server holds for session, ascending by part number.

    The hash of each record is the ETag without quotes, which for a plain part
    upload is the md5 of its bytes, so the result can be passed straight to
    stream_upload as the resume manifest.
    """
    base = f"{object_path(session.bucket, session.key)}?uploadId={session.upload_id}"
    out: list[UploadedPart] = []
    marker: str | None = None
    while True:
        path = base if marker is None else f"{base}&part-number-marker={marker}"
        response = conn.execute(method="GET", path=path)
        page = parse_list_parts(response.body)
        for part in page.parts:
            out.append(
                UploadedPart(
                    part_number=part.part_number,
                    size=part.size,
                    hash=part.etag.strip('"').lower(),
                    etag=part.etag,
                )
            )
        if not page.is_truncated or not page.next_part_number_marker:
            break
        marker = page.next_part_number_marker
    out.sort(key=lambda p: p.part_number)
    logger.info(f"Found {len(out)} uploaded parts for {session.bucket}/{session.key}")
    return out
