import logging
from typing import Callable

from s3_upload_api.errors import S3UploadError
from s3_upload_api.s3.signer import SigV4Signer, Signer
from s3_upload_api.s3.transport import (
    RequestParams,
    Response,
    Transport,
    create_transport,
)
from s3_upload_api.s3.types import ConnectionParams
from s3_upload_api.s3.xml_parsers import parse_error

logger = logging.getLogger(__name__)

ErrorParser = Callable[[Response], S3UploadError]


class S3Connection:
    """Connection target plus the signer, transport and error parser used to talk to it.

    Operations receive this object explicitly; nothing here is global.
    """

    def __init__(
        self,
        params: ConnectionParams,
        transport: Transport | None = None,
        signer: Signer | None = None,
        error_parser: ErrorParser | None = None,
    ) -> None:
        self.params = params
        self.transport: Transport = transport or create_transport()
        self.signer: Signer = signer or SigV4Signer(
            region_name=params.credentials.region_name,
            session_token=params.credentials.session_token,
        )
        self.error_parser: ErrorParser = error_parser or parse_error

    def make_request(
        self, method: str, path: str, headers: dict[str, str] | None = None
    ) -> RequestParams:
        return RequestParams(
            protocol=self.params.protocol,
            host=self.params.host,
            port=self.params.port,
            path=path,
            method=method,
            headers=dict(headers or {}),
        )

    def execute(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        payload_hash: str = "",
    ) -> Response:
        """Sign and send a request, raising the parsed error on any non-200 status."""
        request = self.make_request(method, path, headers)
        credentials = self.params.credentials
        signed = self.signer.sign(
            request,
            payload_hash,
            credentials.access_key_id,
            credentials.secret_access_key,
        )
        response = self.transport.request(signed, body)
        if response.status_code != 200:
            err = self.error_parser(response)
            logger.debug(f"{method} {path} failed: {err}")
            raise err
        return response
