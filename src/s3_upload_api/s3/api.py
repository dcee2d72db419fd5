import json
import logging
import mimetypes
import warnings
from pathlib import Path
from typing import BinaryIO, Callable, Iterable

from s3_upload_api.s3.connection import ErrorParser, S3Connection
from s3_upload_api.s3.multipart.complete import complete_multipart_upload
from s3_upload_api.s3.multipart.finished_piece import FinishedPiece
from s3_upload_api.s3.multipart.initiate import initiate_new_multipart_upload
from s3_upload_api.s3.multipart.list_parts import list_parts
from s3_upload_api.s3.multipart.part_size import MIN_PART_SIZE, calculate_part_size
from s3_upload_api.s3.multipart.put_object import DEFAULT_CONTENT_TYPE, put_object
from s3_upload_api.s3.multipart.stream_upload import stream_upload
from s3_upload_api.s3.multipart.upload_state import UploadState, default_state_path
from s3_upload_api.s3.multipart.uploaded_part import UploadedPart
from s3_upload_api.s3.signer import Signer
from s3_upload_api.s3.transport import Transport
from s3_upload_api.s3.types import (
    ConnectionParams,
    MultiUploadResult,
    S3UploadTarget,
    UploadSession,
)

logger = logging.getLogger(__name__)

_MIN_THRESHOLD_FOR_CHUNKING = MIN_PART_SIZE


class S3Client:
    def __init__(
        self,
        params: ConnectionParams,
        transport: Transport | None = None,
        signer: Signer | None = None,
        error_parser: ErrorParser | None = None,
        verbose: bool = False,
    ) -> None:
        self.verbose = verbose
        self.params = params
        self.conn = S3Connection(
            params, transport=transport, signer=signer, error_parser=error_parser
        )

    def initiate(
        self, bucket_name: str, object_name: str, content_type: str | None = None
    ) -> UploadSession:
        return initiate_new_multipart_upload(
            self.conn, bucket_name, object_name, content_type or DEFAULT_CONTENT_TYPE
        )

    def put_object(
        self,
        bucket_name: str,
        object_name: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        return put_object(
            self.conn,
            bucket=bucket_name,
            key=object_name,
            data=data,
            content_type=content_type,
        )

    def list_parts(self, session: UploadSession) -> list[UploadedPart]:
        return list_parts(self.conn, session)

    def upload_stream(
        self,
        session: UploadSession,
        stream: BinaryIO | Iterable[bytes],
        total_size: int,
        uploaded_parts: list[UploadedPart] | None = None,
        on_part: Callable[[UploadedPart], None] | None = None,
    ) -> list[FinishedPiece]:
        return stream_upload(
            self.conn,
            session,
            stream,
            total_size,
            uploaded_parts=uploaded_parts,
            on_part=on_part,
        )

    def complete(self, session: UploadSession, parts: list[FinishedPiece]) -> None:
        complete_multipart_upload(self.conn, session, parts)

    def _load_or_create_state(
        self,
        target: S3UploadTarget,
        content_type: str,
        file_size: int,
        resume_path_json: Path | None,
    ) -> UploadState:
        part_size = calculate_part_size(file_size)
        path = resume_path_json or default_state_path(
            target.bucket_name, target.s3_key, part_size
        )
        loaded = UploadState.load(path)
        if loaded is not None:
            same_target = (
                loaded.session.bucket == target.bucket_name
                and loaded.session.key == target.s3_key
                and loaded.file_size == file_size
                and loaded.part_size == part_size
            )
            if same_target:
                return loaded
            logger.info(
                f"Cannot resume upload: source changed, starting over for {target.src_file}"
            )
        session = self.initiate(target.bucket_name, target.s3_key, content_type)
        state = UploadState(
            session=session,
            file_size=file_size,
            part_size=part_size,
            persistent=path,
        )
        state.save()
        return state

    def upload_file_multipart(
        self,
        upload_target: S3UploadTarget,
        resume_path_json: Path | None = None,
    ) -> MultiUploadResult:
        """Upload a file, resuming from resume_path_json when it describes the same upload."""
        bucket_name = upload_target.bucket_name
        src_file = upload_target.src_file
        content_type = (
            upload_target.content_type
            or mimetypes.guess_type(str(src_file))[0]
            or DEFAULT_CONTENT_TYPE
        )
        try:
            if upload_target.src_file_size is None:
                filesize = src_file.stat().st_size
            else:
                filesize = upload_target.src_file_size

            if filesize < _MIN_THRESHOLD_FOR_CHUNKING:
                if self.verbose:
                    warnings.warn(
                        f"File size {filesize} is less than the minimum threshold for chunking ({_MIN_THRESHOLD_FOR_CHUNKING}), switching to single request upload."
                    )
                self.put_object(
                    bucket_name,
                    upload_target.s3_key,
                    src_file.read_bytes(),
                    content_type=content_type,
                )
                return MultiUploadResult.UPLOADED_FRESH

            state = self._load_or_create_state(
                upload_target, content_type, filesize, resume_path_json
            )
            resume_parts = state.resume_manifest()
            if resume_parts:
                logger.info(
                    f"Resuming upload for {src_file}, {len(resume_parts)} parts already uploaded"
                )
            with open(src_file, "rb") as f:
                parts = self.upload_stream(
                    state.session,
                    f,
                    filesize,
                    uploaded_parts=resume_parts,
                    on_part=state.add_finished,
                )
            self.complete(state.session, parts)
            state.remove()
            if resume_parts:
                return MultiUploadResult.UPLOADED_RESUME
            return MultiUploadResult.UPLOADED_FRESH
        except Exception as e:
            credentials = self.params.credentials
            info_json = {
                "bucket": bucket_name,
                "key": upload_target.s3_key,
                "access_key_id": credentials.access_key_id[:4] + "...",
                "endpoint_url": self.params.endpoint_url,
                "region": credentials.region_name,
            }
            info_json_str = json.dumps(info_json, indent=2)
            warnings.warn(f"Error uploading file: {e}\nInfo:\n\n{info_json_str}")
            raise
