import hashlib
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

from appdirs import user_cache_dir

from s3_upload_api.s3.multipart.finished_piece import FinishedPiece
from s3_upload_api.s3.multipart.uploaded_part import UploadedPart
from s3_upload_api.s3.types import UploadSession

logger = logging.getLogger(__name__)

_SAVE_STATE_LOCK = Lock()
_STATE_DIR = Path(user_cache_dir("s3_upload_api")) / "resume"


def default_state_path(bucket: str, key: str, part_size: int) -> Path:
    safe_key = re.sub(r"[^A-Za-z0-9._-]", "_", f"{bucket}_{key}")
    return _STATE_DIR / f"{safe_key}_part_size_{part_size}_.json"


def make_fingerprint(bucket: str, key: str, file_size: int, part_size: int) -> str:
    # hash the attributes that are used to identify the upload
    hasher = hashlib.sha256()
    hasher.update(bucket.encode("utf-8"))
    hasher.update(key.encode("utf-8"))
    hasher.update(str(file_size).encode("utf-8"))
    hasher.update(str(part_size).encode("utf-8"))
    return hasher.hexdigest()


@dataclass
class UploadState:
    """On-disk record of an upload in progress, used to build the resume manifest."""

    session: UploadSession
    file_size: int
    part_size: int
    persistent: Path | None = None
    parts: list[UploadedPart] = field(default_factory=list)
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def __post_init__(self):
        if self.persistent is None:
            self.persistent = default_state_path(
                self.session.bucket, self.session.key, self.part_size
            )

    def fingerprint(self) -> str:
        return make_fingerprint(
            self.session.bucket, self.session.key, self.file_size, self.part_size
        )

    def total_parts(self) -> int:
        if self.file_size == 0:
            return 1
        out = self.file_size // self.part_size
        if self.file_size % self.part_size:
            return out + 1
        return out

    def finished(self) -> int:
        return len(self.parts)

    def is_done(self) -> bool:
        return self.finished() >= self.total_parts()

    def resume_manifest(self) -> list[UploadedPart]:
        """The recorded parts, ascending by part number. The records themselves stay in place."""
        with self.lock:
            return sorted(self.parts, key=lambda p: p.part_number)

    def add_finished(self, part: UploadedPart) -> None:
        # one record per part number, the newest wins
        with self.lock:
            self.parts = [p for p in self.parts if p.part_number != part.part_number]
            self.parts.append(part)
            self.parts.sort(key=lambda p: p.part_number)
            self._save_no_lock()

    def finished_pieces(self) -> list[FinishedPiece]:
        with self.lock:
            return [p.finished_piece() for p in self.parts]

    def save(self) -> None:
        with self.lock:
            self._save_no_lock()

    def _save_no_lock(self) -> None:
        assert self.persistent is not None, "No path to save to"
        with _SAVE_STATE_LOCK:
            self.persistent.parent.mkdir(parents=True, exist_ok=True)
            self.persistent.write_text(self.to_json_str(), encoding="utf-8")

    def remove(self) -> None:
        assert self.persistent is not None
        with _SAVE_STATE_LOCK:
            if self.persistent.exists():
                self.persistent.unlink()

    def to_json(self) -> dict:
        finished = len(self.parts)
        total = self.total_parts()
        return {
            "session": self.session.to_json(),
            "file_size": self.file_size,
            "part_size": self.part_size,
            "fingerprint": self.fingerprint(),
            "finished_parts": [p.to_json() for p in self.parts],
            "finished_count": finished,
            "total_parts": total,
            "completed": f"{(finished / total) * 100:.2f}%",
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_json(), indent=4)

    @staticmethod
    def from_json(json_file: Path) -> "UploadState":
        data = json.loads(json_file.read_text(encoding="utf-8"))
        state = UploadState(
            session=UploadSession.from_json(data["session"]),
            file_size=int(data["file_size"]),
            part_size=int(data["part_size"]),
            persistent=json_file,
            parts=[UploadedPart.from_json(p) for p in data["finished_parts"]],
        )
        stored = data.get("fingerprint")
        if stored is not None and stored != state.fingerprint():
            raise ValueError(f"Fingerprint mismatch in {json_file}")
        return state

    @staticmethod
    def load(path: Path) -> "UploadState | None":
        """Load a saved state, or None if there is none or it cannot be read."""
        if not path.exists():
            logger.info(f"Resumable info path {path} does not exist")
            return None
        with _SAVE_STATE_LOCK:
            try:
                return UploadState.from_json(path)
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Error loading state from {path}: {e}")
                return None
