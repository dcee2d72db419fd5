import logging
from collections import deque
from threading import Lock
from typing import BinaryIO, Callable, Iterable

from s3_upload_api.errors import SizeMismatchError
from s3_upload_api.s3.chunk_stream import iter_blocks
from s3_upload_api.s3.connection import S3Connection
from s3_upload_api.s3.multipart.finished_piece import FinishedPiece
from s3_upload_api.s3.multipart.part_size import (
    MAX_PART_NUMBER,
    calculate_part_size,
)
from s3_upload_api.s3.multipart.put_object import do_put_object
from s3_upload_api.s3.multipart.uploaded_part import PartDescriptor, UploadedPart
from s3_upload_api.s3.types import UploadSession
from s3_upload_api.util import md5_hex

logger = logging.getLogger(__name__)

_SIZE_MISMATCH = "actual size does not match specified size"


class _UploadTally:
    """Running state of one stream upload.

    Holds bytes seen, the next part number, the manifest and the first error.
    Once an error is latched every later one is dropped.
    """

    def __init__(
        self, part_size: int, total_size: int, uploaded_parts: list[UploadedPart]
    ) -> None:
        self.part_size = part_size
        self.total_size = total_size
        self.total_seen = 0
        self.part_number = 1
        self.etags: list[FinishedPiece] = []
        self.pending: deque[UploadedPart] = deque(uploaded_parts)
        self.errored: Exception | None = None
        self._lock = Lock()

    def latch(self, err: Exception) -> None:
        with self._lock:
            if self.errored is None:
                self.errored = err
            else:
                logger.debug(f"Discarding error after first failure: {err}")

    def has_error(self) -> bool:
        with self._lock:
            return self.errored is not None

    def next_part(self, block: bytes) -> PartDescriptor:
        with self._lock:
            if self.part_number > MAX_PART_NUMBER:
                raise SizeMismatchError(
                    f"{_SIZE_MISMATCH}: part {self.part_number} exceeds the {MAX_PART_NUMBER} part limit"
                )
            size = len(block)
            if size < self.part_size:
                expected = self.total_size - self.total_seen
                if expected != size:
                    raise SizeMismatchError(
                        f"{_SIZE_MISMATCH}: part {self.part_number} has {size} bytes, expected {expected}"
                    )
            if self.total_seen + size > self.total_size:
                raise SizeMismatchError(
                    f"{_SIZE_MISMATCH}: stream exceeds {self.total_size} bytes"
                )
            self.total_seen += size
            descriptor = PartDescriptor(
                part_number=self.part_number, size=size, hash=md5_hex(block)
            )
            self.part_number += 1
            return descriptor

    def pop_resume_record(self) -> UploadedPart | None:
        with self._lock:
            if not self.pending:
                return None
            return self.pending.popleft()

    def add_finished(self, piece: FinishedPiece) -> None:
        with self._lock:
            self.etags.append(piece)


def _upload_block(
    conn: S3Connection,
    session: UploadSession,
    tally: _UploadTally,
    block: bytes,
    on_part: Callable[[UploadedPart], None] | None,
) -> None:
    descriptor = tally.next_part(block)
    record = tally.pop_resume_record()
    if record is not None and record.hash == descriptor.hash:
        logger.info(
            f"Part {descriptor.part_number} of {session.key} already uploaded, skipping"
        )
        etag = record.etag
    else:
        etag = do_put_object(
            conn,
            bucket=session.bucket,
            key=session.key,
            content_type=session.content_type,
            size=descriptor.size,
            upload_id=session.upload_id,
            part_number=descriptor.part_number,
            data=block,
        )
    tally.add_finished(FinishedPiece(part_number=descriptor.part_number, etag=etag))
    if on_part is not None:
        on_part(UploadedPart.from_descriptor(descriptor, etag))


def stream_upload(
    conn: S3Connection,
    session: UploadSession,
    stream: BinaryIO | Iterable[bytes],
    total_size: int,
    uploaded_parts: list[UploadedPart] | None = None,
    on_part: Callable[[UploadedPart], None] | None = None,
) -> list[FinishedPiece]:
    """Split stream into parts and upload the ones the server does not already have.

    uploaded_parts is the resume manifest: its records are compared in order
    against the parts produced from the stream and matching parts are not sent
    again. on_part is called once per resolved part, uploaded or skipped.

    Returns the completion manifest. The first failure stops the upload, no
    further data is read from the stream, and that failure is raised.
    An empty stream with total_size 0 is uploaded as a single empty part.
    """
    part_size = calculate_part_size(total_size)
    if -(-total_size // part_size) > MAX_PART_NUMBER:
        raise ValueError(
            f"Object of {total_size} bytes needs more than {MAX_PART_NUMBER} parts of {part_size} bytes"
        )
    tally = _UploadTally(part_size, total_size, list(uploaded_parts or []))
    logger.info(
        f"Streaming {total_size} bytes to {session.bucket}/{session.key} in parts of {part_size}"
    )

    blocks = iter_blocks(stream, part_size)
    for block in blocks:
        try:
            _upload_block(conn, session, tally, block, on_part)
        except Exception as e:
            tally.latch(e)
        if tally.has_error():
            break

    if tally.errored is not None:
        raise tally.errored
    if total_size == 0 and not tally.etags:
        _upload_block(conn, session, tally, b"", on_part)
    if tally.total_seen != total_size:
        raise SizeMismatchError(
            f"{_SIZE_MISMATCH}: got {tally.total_seen} bytes, expected {total_size}"
        )
    if tally.pending:
        logger.warning(
            f"{len(tally.pending)} resume records for {session.key} were never matched, ignoring them"
        )
    return list(tally.etags)
