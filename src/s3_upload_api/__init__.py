from . import log  # noqa: F401
from .config import S3Config, load_connection_params
from .errors import (
    ProtocolError,
    S3UploadError,
    ServerError,
    SizeMismatchError,
    TransportError,
)
from .s3.api import S3Client
from .s3.connection import S3Connection
from .s3.multipart.complete import complete_multipart_upload
from .s3.multipart.finished_piece import FinishedPiece
from .s3.multipart.initiate import initiate_new_multipart_upload
from .s3.multipart.list_parts import list_parts
from .s3.multipart.part_size import calculate_part_size
from .s3.multipart.put_object import do_put_object, put_object
from .s3.multipart.stream_upload import stream_upload
from .s3.multipart.upload_state import UploadState
from .s3.multipart.uploaded_part import PartDescriptor, UploadedPart
from .s3.signer import SigV4Signer
from .s3.transport import HttpxTransport
from .s3.types import (
    ConnectionParams,
    MultiUploadResult,
    S3Credentials,
    S3UploadTarget,
    UploadSession,
)

__all__ = [
    "S3Client",
    "S3Connection",
    "S3Config",
    "load_connection_params",
    "ConnectionParams",
    "S3Credentials",
    "S3UploadTarget",
    "UploadSession",
    "MultiUploadResult",
    "FinishedPiece",
    "PartDescriptor",
    "UploadedPart",
    "UploadState",
    "SigV4Signer",
    "HttpxTransport",
    "initiate_new_multipart_upload",
    "calculate_part_size",
    "stream_upload",
    "do_put_object",
    "put_object",
    "complete_multipart_upload",
    "list_parts",
    "S3UploadError",
    "SizeMismatchError",
    "ProtocolError",
    "ServerError",
    "TransportError",
]
