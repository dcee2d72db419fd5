from dataclasses import replace
from typing import Protocol

from botocore.auth import EMPTY_SHA256_HASH, S3SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from s3_upload_api.s3.transport import RequestParams


class Signer(Protocol):
    def sign(
        self,
        request: RequestParams,
        payload_hash: str,
        access_key: str,
        secret_key: str,
    ) -> RequestParams:
        ...


class _PrecomputedPayloadAuth(S3SigV4Auth):
    # The body is hashed by the caller before the request exists, so botocore
    # must not try to read or re-hash it.
    def __init__(
        self, credentials: Credentials, region_name: str, payload_hash: str
    ) -> None:
        super().__init__(credentials, "s3", region_name)
        self._payload_hash = payload_hash

    def payload(self, request) -> str:
        return self._payload_hash


class SigV4Signer:
    """AWS Signature Version 4 signing via botocore."""

    def __init__(self, region_name: str = "us-east-1", session_token: str | None = None):
        self.region_name = region_name
        self.session_token = session_token

    def sign(
        self,
        request: RequestParams,
        payload_hash: str,
        access_key: str,
        secret_key: str,
    ) -> RequestParams:
        credentials = Credentials(access_key, secret_key, self.session_token)
        aws_request = AWSRequest(
            method=request.method,
            url=request.url,
            headers=dict(request.headers),
        )
        auth = _PrecomputedPayloadAuth(
            credentials=credentials,
            region_name=self.region_name,
            payload_hash=payload_hash or EMPTY_SHA256_HASH,
        )
        auth.add_auth(aws_request)
        headers = {key: str(value) for key, value in aws_request.headers.items()}
        return replace(request, headers=headers)
