class S3UploadError(Exception):
    """Base class for every failure raised by s3_upload_api."""


class SizeMismatchError(S3UploadError):
    """Declared and actual byte counts disagree, for a part or a whole object."""


class ProtocolError(S3UploadError):
    """A success response was missing an expected field or was malformed."""


class TransportError(S3UploadError):
    """The request never produced a response (connection reset, timeout...)."""


class ServerError(S3UploadError):
    """A non-success response, with whatever the error document carried."""

    def __init__(
        self,
        status_code: int,
        code: str | None = None,
        message: str | None = None,
        request_id: str | None = None,
        host_id: str | None = None,
        resource: str | None = None,
        bucket: str | None = None,
        key: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.request_id = request_id
        self.host_id = host_id
        self.resource = resource
        self.bucket = bucket
        self.key = key
        super().__init__(str(self))

    def __str__(self) -> str:
        code = self.code or "UnknownError"
        msg = f"{code} (HTTP {self.status_code})"
        if self.message:
            msg += f": {self.message}"
        if self.resource:
            msg += f" [resource: {self.resource}]"
        if self.request_id:
            msg += f" [request id: {self.request_id}]"
        return msg

    def __repr__(self) -> str:
        return f"ServerError(status_code={self.status_code}, code={self.code!r}, message={self.message!r})"
