import json
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.types import GenerationFailure  # noqa: E402
from app.schemas.resume import CandidateProfile, Education, Experience, JobPosting  # noqa: E402
from app.services.match_service import (  # noqa: E402
    build_prompt_variables,
    calculate_category_scores,
    score_match,
    skills_match_score,
)


class StubGateway:
    def __init__(self, reply: str):
        self.reply = reply
        self.prompts: list[str] = []

    def generate(self, prompt_text: str) -> str:
        self.prompts.append(prompt_text)
        return self.reply


class FailingGateway:
    def generate(self, prompt_text: str) -> str:
        raise GenerationFailure("quota exceeded", code="llm_quota")


def _profile(**overrides) -> CandidateProfile:
    values = {
        "id": "resume-1",
        "raw_text": "Jane Roe Go Docker",
        "parsed_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return CandidateProfile(**values)


class SkillOverlapTests(unittest.TestCase):
    def test_case_insensitive_overlap(self):
        self.assertEqual(skills_match_score(["python", "Java"], ["Python", "SQL"]), 0.5)

    def test_empty_lists_score_zero(self):
        self.assertEqual(skills_match_score([], ["Python"]), 0.0)
        self.assertEqual(skills_match_score(["Python"], []), 0.0)
        self.assertEqual(skills_match_score([], []), 0.0)

    def test_no_fuzzy_matching(self):
        self.assertEqual(skills_match_score(["Postgres"], ["PostgreSQL"]), 0.0)

    def test_presence_scores(self):
        job = JobPosting(title="Engineer")
        empty = calculate_category_scores(_profile(), job)
        self.assertEqual(empty["experience"], 0.4)
        self.assertEqual(empty["education"], 0.4)

        full = calculate_category_scores(
            _profile(
                experiences=[Experience(company="Acme", position="Engineer")],
                educations=[Education(degree="BSc", field="CS")],
            ),
            job,
        )
        self.assertEqual(full["experience"], 0.8)
        self.assertEqual(full["education"], 0.8)


class PromptVariableTests(unittest.TestCase):
    def test_defaults_for_missing_values(self):
        variables = build_prompt_variables(_profile(), JobPosting(title="Engineer"))
        self.assertEqual(variables["candidateName"], "Unknown")
        self.assertEqual(variables["skills"], "None listed")
        self.assertEqual(variables["experience"], "No experience listed")
        self.assertEqual(variables["education"], "No education listed")
        self.assertEqual(variables["requiredSkills"], "Not specified")
        self.assertEqual(variables["responsibilities"], "Not specified")
        self.assertEqual(variables["qualifications"], "Not specified")

    def test_joins_values(self):
        profile = _profile(
            candidate_name="Jane Roe",
            skills=["Go", "Docker"],
            experiences=[
                Experience(company="Acme", position="SRE"),
                Experience(company="Globex", position="Developer"),
            ],
            educations=[Education(degree="BSc", field="Physics")],
        )
        job = JobPosting(
            title="Platform Engineer",
            required_skills=["Go", "Kubernetes"],
            responsibilities=["Run clusters", "Write tooling"],
            qualifications=["5 years"],
        )
        variables = build_prompt_variables(profile, job)
        self.assertEqual(variables["skills"], "Go, Docker")
        self.assertEqual(variables["experience"], "SRE at Acme; Developer at Globex")
        self.assertEqual(variables["education"], "BSc in Physics")
        self.assertEqual(variables["jobTitle"], "Platform Engineer")
        self.assertEqual(variables["requiredSkills"], "Go, Kubernetes")
        self.assertEqual(variables["responsibilities"], "Run clusters; Write tooling")


class ScoreMatchTests(unittest.TestCase):
    def setUp(self):
        self.profile = _profile(skills=["Go", "Docker"])
        self.job = JobPosting(id="job-9", title="Platform Engineer", required_skills=["Go", "Kubernetes"])

    def test_uses_model_reply_and_overrides_ids(self):
        reply = json.dumps(
            {
                "resumeId": "bogus",
                "jobDescriptionId": "bogus",
                "matchScore": 0.72,
                "matchedSkills": ["Go"],
                "missingSkills": ["Kubernetes"],
                "analysis": "Solid Go background.",
                "recommendations": ["Learn Kubernetes"],
            }
        )
        gateway = StubGateway(reply)
        result = score_match(self.profile, self.job, gateway)

        self.assertIn("- Required Skills: Go, Kubernetes", gateway.prompts[0])
        self.assertEqual(result.resume_id, "resume-1")
        self.assertEqual(result.job_description_id, "job-9")
        self.assertAlmostEqual(result.match_score, 0.72)
        self.assertEqual(result.matched_skills, ["Go"])
        self.assertEqual(result.missing_skills, ["Kubernetes"])
        self.assertEqual(result.recommendations, ["Learn Kubernetes"])
        self.assertEqual(result.category_scores, {"skills": 0.5, "experience": 0.4, "education": 0.4})

    def test_missing_fields_default(self):
        result = score_match(self.profile, self.job, StubGateway("```json\n{}\n```"))
        self.assertEqual(result.match_score, 0.0)
        self.assertEqual(result.matched_skills, [])
        self.assertEqual(result.missing_skills, [])
        self.assertEqual(result.analysis, "")
        self.assertEqual(result.recommendations, [])

    def test_out_of_range_score_is_clamped(self):
        result = score_match(self.profile, self.job, StubGateway('{"matchScore": 85}'))
        self.assertEqual(result.match_score, 1.0)

    def test_oversized_score_keeps_other_fields(self):
        reply = '{"matchScore": 1' + "0" * 400 + ', "analysis": "Strong fit", "matchedSkills": ["Go"]}'
        result = score_match(self.profile, self.job, StubGateway(reply))
        self.assertEqual(result.analysis, "Strong fit")
        self.assertEqual(result.matched_skills, ["Go"])
        self.assertEqual(result.match_score, 0.0)

    def test_fallback_on_generation_failure(self):
        result = score_match(self.profile, self.job, FailingGateway())

        self.assertEqual(result.resume_id, "resume-1")
        self.assertEqual(result.job_description_id, "job-9")
        self.assertEqual(result.match_score, 0.5)
        self.assertEqual(result.category_scores["skills"], 0.5)
        self.assertEqual(set(result.category_scores), {"skills", "experience", "education"})
        self.assertEqual(result.matched_skills, [])
        self.assertEqual(result.missing_skills, [])
        self.assertTrue(result.analysis)
        self.assertEqual(len(result.recommendations), 1)

    def test_fallback_on_malformed_reply(self):
        result = score_match(self.profile, self.job, StubGateway("The candidate looks great!"))
        self.assertEqual(result.match_score, 0.5)
        self.assertEqual(result.category_scores["skills"], 0.5)


if __name__ == "__main__":
    unittest.main()
