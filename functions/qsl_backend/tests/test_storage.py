import io
import unittest

from botocore.response import StreamingBody
from botocore.stub import Stubber

from qsl_backend.storage import CosStorageClient, InMemoryStorageClient, StorageError

BUCKET = "qsl-1250000000"


class CosStorageClientTests(unittest.TestCase):
    def setUp(self):
        self.client = CosStorageClient(
            bucket=BUCKET,
            region="ap-guangzhou",
            endpoint="https://cos.ap-guangzhou.myqcloud.com",
            access_key_id="AKIDEXAMPLE",
            secret_access_key="secret",
        )
        self.stubber = Stubber(self.client._client)
        self.stubber.activate()
        self.addCleanup(self.stubber.deactivate)

    def test_get_bytes(self):
        payload = b'[{"id": "a"}]'
        self.stubber.add_response(
            "get_object",
            {"Body": StreamingBody(io.BytesIO(payload), len(payload))},
            expected_params={"Bucket": BUCKET, "Key": "qsl/sent.json"},
        )
        self.assertEqual(self.client.get_bytes("qsl/sent.json"), payload)
        self.stubber.assert_no_pending_responses()

    def test_missing_key_raises_file_not_found(self):
        self.stubber.add_client_error(
            "get_object", service_error_code="NoSuchKey", http_status_code=404
        )
        with self.assertRaises(FileNotFoundError):
            self.client.get_bytes("qsl/sent.json")

    def test_other_errors_carry_code_and_request_id(self):
        self.stubber.add_client_error(
            "get_object",
            service_error_code="AccessDenied",
            service_message="Access Denied.",
            http_status_code=403,
            response_meta={"RequestId": "req-7"},
        )
        with self.assertRaises(StorageError) as ctx:
            self.client.get_bytes("qsl/sent.json")
        self.assertEqual(ctx.exception.code, "AccessDenied")
        self.assertEqual(ctx.exception.request_id, "req-7")

    def test_put_bytes(self):
        self.stubber.add_response("put_object", {})
        self.client.put_bytes("qsl/sent.json", b"[]")
        self.stubber.assert_no_pending_responses()

    def test_put_error(self):
        self.stubber.add_client_error(
            "put_object", service_error_code="SignatureDoesNotMatch", http_status_code=403
        )
        with self.assertRaises(StorageError) as ctx:
            self.client.put_bytes("qsl/sent.json", b"[]")
        self.assertEqual(ctx.exception.code, "SignatureDoesNotMatch")


class InMemoryStorageClientTests(unittest.TestCase):
    def test_roundtrip_and_missing(self):
        storage = InMemoryStorageClient()
        with self.assertRaises(FileNotFoundError):
            storage.get_bytes("missing")
        storage.put_bytes("key", b"[]")
        self.assertEqual(storage.get_bytes("key"), b"[]")
        self.assertEqual(
            storage.calls, [("get", "missing"), ("put", "key"), ("get", "key")]
        )


if __name__ == "__main__":
    unittest.main()
