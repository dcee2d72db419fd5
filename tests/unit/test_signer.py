"""
Unit test file.
"""

import unittest

from s3_upload_api.s3.signer import SigV4Signer
from s3_upload_api.s3.transport import RequestParams
from s3_upload_api.util import sha256_hex


class SignerTester(unittest.TestCase):
    """Test SigV4 signing through botocore."""

    def _request(self) -> RequestParams:
        return RequestParams(
            protocol="http",
            host="s3.test",
            port=9000,
            path="/bucket/dir/my%20file.bin?partNumber=1&uploadId=abc",
            method="PUT",
            headers={"Content-Length": "3", "Content-Type": "text/plain"},
        )

    def test_sign_adds_auth_headers(self) -> None:
        payload_hash = sha256_hex(b"abc")
        signed = SigV4Signer(region_name="us-west-2").sign(
            self._request(), payload_hash, "AKIDEXAMPLE", "secret"
        )
        headers = {k.lower(): v for k, v in signed.headers.items()}
        self.assertTrue(
            headers["authorization"].startswith("AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/")
        )
        self.assertIn("/us-west-2/s3/aws4_request", headers["authorization"])
        self.assertEqual(headers["x-amz-content-sha256"], payload_hash)
        self.assertIn("x-amz-date", headers)
        self.assertEqual(headers["content-type"], "text/plain")

    def test_sign_does_not_touch_the_input(self) -> None:
        request = self._request()
        signed = SigV4Signer().sign(request, sha256_hex(b""), "AKIDEXAMPLE", "secret")
        self.assertNotIn("Authorization", request.headers)
        self.assertEqual(signed.path, request.path)
        self.assertEqual(signed.method, "PUT")

    def test_empty_payload_hash(self) -> None:
        signed = SigV4Signer().sign(self._request(), "", "AKIDEXAMPLE", "secret")
        headers = {k.lower(): v for k, v in signed.headers.items()}
        self.assertEqual(headers["x-amz-content-sha256"], sha256_hex(b""))


if __name__ == "__main__":
    unittest.main()
