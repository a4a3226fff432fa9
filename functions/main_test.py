# Standard library imports
import base64
import json
import unittest
from unittest.mock import patch

# Local application imports
from main import main_handler
from qsl_backend.card_store import CardStore
from qsl_backend.models import CollectionConfig
from qsl_backend.service import CardService
from qsl_backend.storage import InMemoryStorageClient

CARD = {
    "callSign": "W1XYZ",
    "myCallSign": "BG7XYZ",
    "date": "2024-02-10",
    "mode": "EYE",
    "cardType": "online",
}


class TestMainHandler(unittest.TestCase):

    def setUp(self):
        self.storage = InMemoryStorageClient()
        self.service = CardService(
            CardStore(
                self.storage,
                CollectionConfig(sent_key="sent.json", received_key="received.json"),
            )
        )
        patcher = patch("main.get_card_service", return_value=self.service)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_options_preflight(self):
        response = main_handler({"httpMethod": "OPTIONS"}, {})
        self.assertEqual(response["statusCode"], 204)
        self.assertEqual(response["body"], "")
        self.assertEqual(response["headers"]["Access-Control-Allow-Origin"], "*")

    def test_ping_uses_context_request_id(self):
        response = main_handler(
            {"httpMethod": "GET", "queryString": {"action": "ping"}},
            {"request_id": "scf-123"},
        )
        self.assertEqual(response["statusCode"], 200)
        body = json.loads(response["body"])
        self.assertEqual(body["code"], 0)
        self.assertEqual(body["requestId"], "scf-123")

    def test_base64_body_save(self):
        raw = json.dumps(
            {"action": "saveCard", "type": "received", "cardData": CARD}
        ).encode("utf-8")
        response = main_handler(
            {
                "httpMethod": "POST",
                "body": base64.b64encode(raw).decode("ascii"),
                "isBase64Encoded": True,
            },
            {"request_id": "scf-456"},
        )
        self.assertEqual(response["statusCode"], 200)
        saved = json.loads(response["body"])["data"]
        self.assertEqual(saved["callSign"], "W1XYZ")
        stored = json.loads(self.storage.stored_objects["received.json"])
        self.assertEqual(stored[0]["id"], saved["id"])

    def test_bad_body_is_400(self):
        response = main_handler(
            {"httpMethod": "POST", "body": "{oops"}, {"request_id": "scf-789"}
        )
        self.assertEqual(response["statusCode"], 400)
        body = json.loads(response["body"])
        self.assertEqual(body["code"], 3001)
        self.assertEqual(body["requestId"], "scf-789")

    def test_parsed_non_object_body_is_400(self):
        response = main_handler(
            {"httpMethod": "POST", "body": [{"action": "ping"}]},
            {"request_id": "scf-321"},
        )
        self.assertEqual(response["statusCode"], 400)
        self.assertEqual(json.loads(response["body"])["code"], 3001)

    def test_missing_action_generates_request_id(self):
        response = main_handler({"httpMethod": "GET"})
        self.assertEqual(response["statusCode"], 400)
        body = json.loads(response["body"])
        self.assertEqual(body["code"], 3002)
        self.assertTrue(body["requestId"])


if __name__ == "__main__":
    unittest.main()
