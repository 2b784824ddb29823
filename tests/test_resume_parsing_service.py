import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.factory import DisabledGateway  # noqa: E402
from app.ai.types import GenerationFailure  # noqa: E402
from app.services.resume_parsing_service import extract_keywords, extract_profile  # noqa: E402


class StubGateway:
    def __init__(self, reply: str):
        self.reply = reply
        self.prompts: list[str] = []

    def generate(self, prompt_text: str) -> str:
        self.prompts.append(prompt_text)
        return self.reply


class FailingGateway:
    def generate(self, prompt_text: str) -> str:
        raise GenerationFailure("timeout", code="llm_timeout")


SAMPLE_TEXT = "John Doe\nSoftware Engineer\nExperience with Java and Spring Boot"

MODEL_PROFILE = {
    "id": "model-made-this-up",
    "fileName": "model.pdf",
    "rawText": "not the real text",
    "candidateName": "John Doe",
    "email": "john@example.com",
    "phone": 5551234567,
    "summary": "Backend engineer",
    "skills": ["Java", "Spring Boot"],
    "experiences": [
        {
            "company": "Acme",
            "position": "Software Engineer",
            "duration": "2019 - 2023",
            "description": "Built services",
            "achievements": ["Cut latency by 30%"],
        }
    ],
    "educations": [{"institution": "MIT", "degree": "BSc", "field": "Computer Science", "year": 2018}],
    "certifications": None,
    "confidence": 0.9,
}


class ResumeParsingServiceTests(unittest.TestCase):
    def test_parses_model_reply_and_keeps_core_fields_local(self):
        gateway = StubGateway("```json\n" + json.dumps(MODEL_PROFILE) + "\n```")
        profile = extract_profile(SAMPLE_TEXT, "resume.pdf", gateway)

        self.assertIn(SAMPLE_TEXT, gateway.prompts[0])
        self.assertNotEqual(profile.id, "model-made-this-up")
        self.assertEqual(profile.file_name, "resume.pdf")
        self.assertEqual(profile.raw_text, SAMPLE_TEXT)
        self.assertEqual(profile.candidate_name, "John Doe")
        self.assertEqual(profile.phone, "5551234567")
        self.assertEqual(profile.skills, ["Java", "Spring Boot"])
        self.assertEqual(profile.experiences[0].achievements, ["Cut latency by 30%"])
        self.assertEqual(profile.educations[0].year, "2018")
        self.assertEqual(profile.certifications, [])
        self.assertEqual(profile.metadata, {})

    def test_fallback_when_model_unreachable(self):
        profile = extract_profile(SAMPLE_TEXT, "test-resume.txt", DisabledGateway())

        self.assertTrue(profile.id)
        self.assertEqual(profile.file_name, "test-resume.txt")
        self.assertEqual(profile.raw_text, SAMPLE_TEXT)
        self.assertEqual(profile.skills, [])
        self.assertEqual(profile.experiences, [])
        self.assertEqual(profile.educations, [])
        self.assertEqual(profile.certifications, [])
        self.assertEqual(profile.metadata, {})
        self.assertIsNone(profile.candidate_name)
        self.assertIsNotNone(profile.parsed_at)

    def test_fallback_on_non_json_reply(self):
        profile = extract_profile(SAMPLE_TEXT, "a.pdf", StubGateway("Here is the parsed resume: John"))
        self.assertEqual(profile.raw_text, SAMPLE_TEXT)
        self.assertEqual(profile.skills, [])

    def test_fallback_on_schema_mismatch(self):
        reply = json.dumps({"candidateName": "John", "skills": "Java, Spring"})
        profile = extract_profile(SAMPLE_TEXT, "a.pdf", StubGateway(reply))
        self.assertIsNone(profile.candidate_name)
        self.assertEqual(profile.skills, [])

    def test_ids_are_unique_across_calls(self):
        ids = {extract_profile(SAMPLE_TEXT, "a.pdf", FailingGateway()).id for _ in range(5)}
        ids.add(extract_profile(SAMPLE_TEXT, "a.pdf", StubGateway(json.dumps(MODEL_PROFILE))).id)
        self.assertEqual(len(ids), 6)

    def test_raw_text_preserved_verbatim(self):
        text = "  Jane\t Roe \n\n  OCR ar7ifacts ~~ \r\n"
        profile = extract_profile(text, None, StubGateway('{"candidateName": "Jane Roe"}'))
        self.assertEqual(profile.raw_text, text)
        self.assertEqual(profile.candidate_name, "Jane Roe")


class KeywordExtractionTests(unittest.TestCase):
    def test_splits_and_dedupes_keywords(self):
        keywords = extract_keywords("text", StubGateway("Python, SQL,python ,  Kubernetes,"))
        self.assertEqual(keywords, ["Python", "SQL", "Kubernetes"])

    def test_returns_empty_list_on_failure(self):
        self.assertEqual(extract_keywords("text", FailingGateway()), [])


if __name__ == "__main__":
    unittest.main()
