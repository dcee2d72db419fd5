from dataclasses import dataclass

from s3_upload_api.s3.multipart.finished_piece import FinishedPiece


@dataclass(frozen=True)
class PartDescriptor:
    part_number: int
    size: int
    hash: str  # md5, lowercase hex


@dataclass(frozen=True)
class UploadedPart:
    """A part the server already holds, known before the current run starts."""

    part_number: int
    size: int
    hash: str
    etag: str

    @staticmethod
    def from_descriptor(descriptor: PartDescriptor, etag: str) -> "UploadedPart":
        return UploadedPart(
            part_number=descriptor.part_number,
            size=descriptor.size,
            hash=descriptor.hash,
            etag=etag,
        )

    def finished_piece(self) -> FinishedPiece:
        return FinishedPiece(part_number=self.part_number, etag=self.etag)

    def to_json(self) -> dict:
        return {
            "part_number": self.part_number,
            "size": self.size,
            "hash": self.hash,
            "etag": self.etag,
        }

    @staticmethod
    def from_json(json: dict) -> "UploadedPart":
        return UploadedPart(
            part_number=int(json["part_number"]),
            size=int(json["size"]),
            hash=str(json["hash"]),
            etag=str(json["etag"]),
        )
