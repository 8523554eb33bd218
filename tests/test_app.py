import unittest
from unittest import mock

from quality_priority import sandbox
from quality_priority.app import QualityPriorityApp
from quality_priority.config import Settings
from quality_priority.engine import RankingRequest
from quality_priority.errors import ProfileNotFoundError


def _settings(priority: int, remux_override: int = 90) -> Settings:
    return Settings.model_validate(
        {
            "catalog": {
                "resolutions": [{"name": "1080p", "priority": priority}],
                "qualities": [{"name": "Remux", "priority": 80}],
            },
            "profiles": [
                {
                    "name": "movies",
                    "reorder": [
                        {"name": "Remux", "type": "quality", "new_priority": remux_override}
                    ],
                }
            ],
        }
    )


class TestQualityPriorityApp(unittest.TestCase):
    def test_create_wires_engine(self) -> None:
        app = QualityPriorityApp.create(_settings(100))
        report = app.engine.rank(RankingRequest(profile="movies"))
        self.assertTrue(report.ok)
        self.assertEqual(report.results[0].candidate.total, 190)
        self.assertEqual(report.to_record()["active_rules"][0]["type"], "quality")

    def test_reload_publishes_new_snapshot(self) -> None:
        app = QualityPriorityApp.create(_settings(100))
        old_snapshot = app.snapshot()
        app.reload(_settings(300))
        self.assertIsNot(app.snapshot(), old_snapshot)
        self.assertIsNot(app.snapshot().catalog, old_snapshot.catalog)
        report = app.engine.rank(RankingRequest(profile="movies"))
        self.assertEqual(report.results[0].candidate.total, 390)

    def test_reload_during_request_does_not_mix_versions(self) -> None:
        app = QualityPriorityApp.create(_settings(100))
        real_sandbox = sandbox.sandbox_from_payload

        def reload_then_sandbox(baseline, payload):
            app.reload(_settings(300, remux_override=10))
            return real_sandbox(baseline, payload)

        with mock.patch(
            "quality_priority.engine.sandbox_from_payload", side_effect=reload_then_sandbox
        ):
            report = app.engine.rank(RankingRequest(profile="movies"))

        self.assertEqual(report.results[0].candidate.total, 190)
        self.assertEqual(report.results[0].candidate.priorities, (100, 90, 0, 0))
        after = app.engine.rank(RankingRequest(profile="movies"))
        self.assertEqual(after.results[0].candidate.priorities, (300, 10, 0, 0))

    def test_priority_table(self) -> None:
        app = QualityPriorityApp.create(_settings(100))
        self.assertEqual(app.priority_table("movies").lookup("1080p", "Remux"), 190)
        with self.assertRaises(ProfileNotFoundError):
            app.priority_table("series")


if __name__ == "__main__":
    unittest.main()
