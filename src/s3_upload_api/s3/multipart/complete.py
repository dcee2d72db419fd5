import logging

from s3_upload_api.s3.connection import S3Connection
from s3_upload_api.s3.multipart.finished_piece import FinishedPiece
from s3_upload_api.s3.types import UploadSession
from s3_upload_api.s3.xml_parsers import build_complete_document
from s3_upload_api.util import object_path, sha256_hex

logger = logging.getLogger(__name__)


def complete_multipart_upload(
    conn: S3Connection, session: UploadSession, parts: list[FinishedPiece]
) -> None:
    """Send the completion document for session, listing parts in ascending order."""
    if not parts:
        raise ValueError(f"No parts to complete upload of {session.key}")
    ordered = FinishedPiece.sorted(parts)  # Some backends need this.
    payload = build_complete_document([(p.part_number, p.etag) for p in ordered])
    logger.info(
        f"Sending multi part completion message for {session.bucket}/{session.key} with {len(ordered)} parts"
    )
    conn.execute(
        method="POST",
        path=f"{object_path(session.bucket, session.key)}?uploadId={session.upload_id}",
        body=payload,
        payload_hash=sha256_hex(payload),
    )
    logger.info(f"Multipart upload completed: {session.bucket}/{session.key}")
