import json
import sys
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
for _path in (PROJECT_ROOT, PROJECT_ROOT / "tests"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from fastapi.testclient import TestClient  # noqa: E402

from cv_reviewer.core.config import settings  # noqa: E402
from cv_reviewer.core.errors import ReviewFailure, file_too_large  # noqa: E402
from cv_reviewer.main import app  # noqa: E402
from cv_reviewer.parsing.file_signatures import DOCX_MIME_TYPE, PDF_MIME_TYPE  # noqa: E402
from review_fixtures import hello_world_docx, hello_world_pdf  # noqa: E402

INVOKER = "cv_reviewer.services.review_service.invoke_review_model"

STUB_REVIEW = {
    "strengths": ["Clear experience statement"],
    "weaknesses": ["No metrics"],
    "suggestions": ["Add quantifiable achievements"],
    "score": 7,
}


class ReviewApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_text_submission_end_to_end(self):
        text = "Experienced backend engineer, 5 years Go and distributed systems."
        with patch(INVOKER, return_value=json.dumps(STUB_REVIEW)) as invoker:
            response = self.client.post("/v1/review", data={"text": text})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), STUB_REVIEW)
        invoker.assert_called_once()
        self.assertIn(text, invoker.call_args.args[0])

    def test_text_reaches_prompt_verbatim(self):
        text = "  Jane Doe\n\n  * Led migration to Kubernetes (2021-2023)\n"
        with patch(INVOKER, return_value=json.dumps(STUB_REVIEW)) as invoker:
            response = self.client.post("/v1/review", data={"text": text})
        self.assertEqual(response.status_code, 200)
        self.assertIn(text, invoker.call_args.args[0])

    def test_no_text_and_no_file(self):
        with patch(INVOKER) as invoker:
            response = self.client.post("/v1/review")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Either text or file must be provided"})
        invoker.assert_not_called()

    def test_whitespace_only_text(self):
        with patch(INVOKER) as invoker:
            response = self.client.post("/v1/review", data={"text": "   \n  "})
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())
        invoker.assert_not_called()

    def test_unsupported_file_type(self):
        with patch(INVOKER) as invoker:
            response = self.client.post(
                "/v1/review",
                files={"file": ("photo.png", b"\x89PNG\r\n\x1a\n0000", "image/png")},
            )
        self.assertEqual(response.status_code, 400)
        self.assertIn("Unsupported file type", response.json()["error"])
        invoker.assert_not_called()

    def test_pdf_upload(self):
        with patch(INVOKER, return_value=json.dumps(STUB_REVIEW)) as invoker:
            response = self.client.post(
                "/v1/review",
                files={"file": ("cv.pdf", hello_world_pdf(), PDF_MIME_TYPE)},
            )
        self.assertEqual(response.status_code, 200)
        self.assertIn("Hello World", invoker.call_args.args[0])

    def test_docx_upload(self):
        with patch(INVOKER, return_value=json.dumps(STUB_REVIEW)) as invoker:
            response = self.client.post(
                "/v1/review",
                files={"file": ("cv.docx", hello_world_docx(), DOCX_MIME_TYPE)},
            )
        self.assertEqual(response.status_code, 200)
        self.assertIn("Hello World", invoker.call_args.args[0])

    def test_file_overrides_text(self):
        with patch(INVOKER, return_value=json.dumps(STUB_REVIEW)) as invoker:
            response = self.client.post(
                "/v1/review",
                data={"text": "pasted text that should be ignored"},
                files={"file": ("cv.txt", b"Hello World from the file", "text/plain")},
            )
        self.assertEqual(response.status_code, 200)
        prompt = invoker.call_args.args[0]
        self.assertIn("Hello World from the file", prompt)
        self.assertNotIn("pasted text that should be ignored", prompt)

    def test_corrupt_pdf(self):
        with patch(INVOKER) as invoker:
            response = self.client.post(
                "/v1/review",
                files={"file": ("cv.pdf", b"this is not a pdf", PDF_MIME_TYPE)},
            )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Failed to extract text from PDF"})
        invoker.assert_not_called()

    def test_oversized_upload(self):
        limited = replace(settings, max_upload_bytes=8)
        with patch("cv_reviewer.api.v1.review.settings", limited), patch(INVOKER) as invoker:
            response = self.client.post(
                "/v1/review",
                files={"file": ("cv.txt", b"Hello World, longer than eight bytes", "text/plain")},
            )
        self.assertEqual(response.status_code, 413)
        self.assertEqual(response.json(), {"error": file_too_large(8).message})
        invoker.assert_not_called()

    def test_chatty_model_output_is_sanitized(self):
        raw = (
            'Here is the result:\n{"strengths":["a"],"weaknesses":[],'
            '"suggestions":["b","b",""],"score":15}'
        )
        with patch(INVOKER, return_value=raw):
            response = self.client.post("/v1/review", data={"text": "Some CV"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"strengths": ["a"], "weaknesses": [], "suggestions": ["b", "b"], "score": 10},
        )

    def test_unparseable_model_output(self):
        with patch(INVOKER, return_value="not json at all"):
            response = self.client.post("/v1/review", data={"text": "Some CV"})
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json(), {"error": "Failed to parse model response"})

    def test_missing_credentials(self):
        unconfigured = replace(settings, openai_api_key=None)
        with patch("cv_reviewer.services.review_llm.settings", unconfigured):
            response = self.client.post("/v1/review", data={"text": "Some CV"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "OPENAI_API_KEY is not set on server"})

    def test_upstream_failure(self):
        failure = ReviewFailure(kind="upstream_error", message="The review model is unavailable right now.")
        with patch(INVOKER, return_value=failure):
            response = self.client.post("/v1/review", data={"text": "Some CV"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "The review model is unavailable right now."})

    def test_unencodable_model_text_is_repaired(self):
        raw = r'{"strengths": ["ok \ud800"], "weaknesses": [], "suggestions": ["fine"], "score": 5}'
        with patch(INVOKER, return_value=raw):
            response = self.client.post("/v1/review", data={"text": "Some CV"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"strengths": ["ok ?"], "weaknesses": [], "suggestions": ["fine"], "score": 5},
        )

    def test_file_field_sent_as_plain_text(self):
        with patch(INVOKER) as invoker:
            response = self.client.post("/v1/review", data={"text": "Some CV", "file": "oops"})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(list(body), ["error"])
        self.assertIn("file", body["error"])
        invoker.assert_not_called()

    def test_unexpected_fault_is_contained(self):
        with patch(INVOKER, side_effect=RuntimeError("secret internal detail")):
            response = self.client.post("/v1/review", data={"text": "Some CV"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Unexpected server error"})


if __name__ == "__main__":
    unittest.main()
