import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.resume_store import SqliteResumeStore  # noqa: E402
from app.schemas.resume import CandidateProfile, Experience  # noqa: E402


class SqliteResumeStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = SqliteResumeStore(":memory:")

    def tearDown(self):
        self.store.close()

    def test_save_and_get_round_trips_profile(self):
        profile = CandidateProfile(
            id="r-1",
            file_name="jane.pdf",
            raw_text="Jane Roe\nPython",
            candidate_name="Jane Roe",
            skills=["Python"],
            experiences=[Experience(company="Acme", position="Dev", achievements=["Shipped v2"])],
            metadata={"fileSize": 10},
            parsed_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        self.store.save(profile)
        self.assertEqual(self.store.get("r-1"), profile)

    def test_get_unknown_returns_none(self):
        self.assertIsNone(self.store.get("missing"))

    def test_list_all_orders_by_parse_time(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for offset, resume_id in ((2, "late"), (0, "early"), (1, "middle")):
            self.store.save(
                CandidateProfile(id=resume_id, raw_text=resume_id, parsed_at=start + timedelta(hours=offset))
            )
        self.assertEqual([p.id for p in self.store.list_all()], ["early", "middle", "late"])


if __name__ == "__main__":
    unittest.main()
