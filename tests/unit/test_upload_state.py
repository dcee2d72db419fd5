"""
Unit test file.
"""

import json
import tempfile
import unittest
from pathlib import Path

from s3_upload_api.s3.multipart.upload_state import UploadState, make_fingerprint
from s3_upload_api.s3.multipart.uploaded_part import UploadedPart
from s3_upload_api.s3.types import UploadSession

MiB = 1024 * 1024


def _session() -> UploadSession:
    return UploadSession(
        bucket="bucket", key="dir/file.bin", content_type="text/plain", upload_id="u-1"
    )


class UploadStateTester(unittest.TestCase):
    """Test saving and loading resume state."""

    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            path = Path(tempdir) / "nested" / "state.json"
            state = UploadState(
                session=_session(), file_size=11 * MiB, part_size=5 * MiB, persistent=path
            )
            state.add_finished(UploadedPart(1, 5 * MiB, "a" * 32, '"e1"'))
            state.add_finished(UploadedPart(2, 5 * MiB, "b" * 32, '"e2"'))
            self.assertTrue(path.exists())
            data = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(data["finished_count"], 2)
            self.assertEqual(data["total_parts"], 3)

            loaded = UploadState.load(path)
            assert loaded is not None
            self.assertEqual(loaded.session, _session())
            self.assertEqual(loaded.parts, state.parts)
            self.assertFalse(loaded.is_done())
            self.assertEqual(
                [p.part_number for p in loaded.finished_pieces()], [1, 2]
            )

    def test_resume_manifest_keeps_records(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            state = UploadState(
                session=_session(),
                file_size=11 * MiB,
                part_size=5 * MiB,
                persistent=Path(tempdir) / "state.json",
                parts=[
                    UploadedPart(2, 5 * MiB, "b" * 32, '"e2"'),
                    UploadedPart(1, 5 * MiB, "a" * 32, '"e1"'),
                ],
            )
            manifest = state.resume_manifest()
            self.assertEqual([p.part_number for p in manifest], [1, 2])
            self.assertEqual(len(state.parts), 2)

    def test_add_finished_replaces_same_part_number(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            path = Path(tempdir) / "state.json"
            state = UploadState(
                session=_session(),
                file_size=11 * MiB,
                part_size=5 * MiB,
                persistent=path,
                parts=[
                    UploadedPart(1, 5 * MiB, "a" * 32, '"e1"'),
                    UploadedPart(3, MiB, "c" * 32, '"e3"'),
                ],
            )
            state.add_finished(UploadedPart(1, 5 * MiB, "d" * 32, '"e1-new"'))
            state.add_finished(UploadedPart(2, 5 * MiB, "b" * 32, '"e2"'))
            self.assertEqual([p.part_number for p in state.parts], [1, 2, 3])
            self.assertEqual(state.parts[0].etag, '"e1-new"')
            loaded = UploadState.load(path)
            assert loaded is not None
            self.assertEqual(loaded.parts, state.parts)

    def test_load_missing_or_corrupt(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            path = Path(tempdir) / "state.json"
            self.assertIsNone(UploadState.load(path))
            path.write_text("{not json", encoding="utf-8")
            self.assertIsNone(UploadState.load(path))

    def test_fingerprint_mismatch_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            path = Path(tempdir) / "state.json"
            state = UploadState(
                session=_session(), file_size=11 * MiB, part_size=5 * MiB, persistent=path
            )
            state.save()
            data = json.loads(path.read_text(encoding="utf-8"))
            data["file_size"] = 12 * MiB
            path.write_text(json.dumps(data), encoding="utf-8")
            self.assertIsNone(UploadState.load(path))

    def test_fingerprint_depends_on_sizes(self) -> None:
        a = make_fingerprint("b", "k", 10, 5)
        self.assertEqual(a, make_fingerprint("b", "k", 10, 5))
        self.assertNotEqual(a, make_fingerprint("b", "k", 11, 5))
        self.assertNotEqual(a, make_fingerprint("b", "k2", 10, 5))

    def test_remove(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            path = Path(tempdir) / "state.json"
            state = UploadState(
                session=_session(), file_size=1, part_size=5 * MiB, persistent=path
            )
            state.save()
            state.remove()
            self.assertFalse(path.exists())
            state.remove()


if __name__ == "__main__":
    unittest.main()
