from dataclasses import dataclass


@dataclass(frozen=True)
class FinishedPiece:
    """One entry of the completion manifest."""

    part_number: int
    etag: str

    def __post_init__(self):
        assert isinstance(self.part_number, int)
        assert isinstance(self.etag, str)

    def to_json(self) -> dict:
        # amazon s3 style dict
        return {"PartNumber": self.part_number, "ETag": self.etag}

    @staticmethod
    def from_json(json: dict) -> "FinishedPiece":
        part_number = json.get("PartNumber") or json.get("part_number")
        etag = json.get("ETag") or json.get("etag")
        assert isinstance(part_number, int)
        assert isinstance(etag, str)
        return FinishedPiece(part_number=part_number, etag=etag)

    @staticmethod
    def sorted(parts: list["FinishedPiece"]) -> list["FinishedPiece"]:
        """Parts in ascending part-number order; duplicates are an error."""
        out = sorted(parts, key=lambda x: x.part_number)
        for prev, curr in zip(out, out[1:]):
            if prev.part_number == curr.part_number:
                raise ValueError(f"Duplicate part number {curr.part_number}")
        return out
