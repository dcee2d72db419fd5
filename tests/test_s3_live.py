"""
Live test against a real S3 compatible server.

Needs S3_ENDPOINT_URL, S3_ACCESS_KEY_ID, S3_SECRET_ACCESS_KEY and
S3_TEST_BUCKET in the environment or in a .env file.
"""

import os
import tempfile
import unittest
from pathlib import Path

from dotenv import load_dotenv

from s3_upload_api import MultiUploadResult, S3Client, S3UploadTarget
from s3_upload_api.config import load_connection_params

load_dotenv()

_PARAMS = load_connection_params()
_BUCKET = os.getenv("S3_TEST_BUCKET")
_ENABLED = _PARAMS is not None and bool(_BUCKET)


class S3LiveTester(unittest.TestCase):
    """Upload through a real server."""

    @unittest.skipIf(not _ENABLED, "S3 credentials not configured")
    def test_upload_file_multipart(self) -> None:
        assert _PARAMS is not None
        assert _BUCKET
        client = S3Client(_PARAMS)
        pattern = bytes(range(256))
        payload = pattern * (11 * 1024 * 1024 // len(pattern))
        with tempfile.TemporaryDirectory() as tempdir:
            tmpfile = Path(tempdir) / "testfile"
            tmpfile.write_bytes(payload)
            state_json = Path(tempdir) / "state.json"
            target = S3UploadTarget(
                src_file=tmpfile, bucket_name=_BUCKET, s3_key="test_data/testfile"
            )
            rslt = client.upload_file_multipart(target, state_json)
            self.assertEqual(rslt, MultiUploadResult.UPLOADED_FRESH)
            self.assertFalse(state_json.exists())


if __name__ == "__main__":
    unittest.main()
