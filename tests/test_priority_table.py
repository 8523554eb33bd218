import unittest

from quality_priority.catalog import AttributeCatalog
from quality_priority.models import Axis, QualityProfile
from quality_priority.priority_table import build_priority_table
from quality_priority.rules import make_rule


def _table():
    catalog = AttributeCatalog(
        {
            Axis.RESOLUTION: [("1080p", 100), ("720p", 50)],
            Axis.QUALITY: [("Remux", 80), ("WEBRip", 20)],
            Axis.CODEC: [("x264", 5)],
        }
    )
    profile = QualityProfile(
        name="movies",
        wanted_resolution=("1080p",),
        reorder=(make_rule("1080p,Remux", "combined_res_qual", 999),),
    )
    return build_priority_table(catalog, profile)


class TestPriorityTable(unittest.TestCase):
    def test_covers_full_catalog(self) -> None:
        table = _table()
        self.assertEqual(len(table), 3 * 3 * 2)
        self.assertEqual(table.profile_name, "movies")

    def test_lookup_is_case_insensitive(self) -> None:
        table = _table()
        self.assertEqual(table.lookup("1080P", "remux"), 999)
        self.assertEqual(table.lookup("1080p", "WEBRip", "x264"), 125)
        self.assertEqual(table.lookup("", ""), 0)
        self.assertIsNone(table.lookup("480p", "Remux"))

    def test_wanted_flags(self) -> None:
        table = _table()
        self.assertTrue(table.entry("1080p", "WEBRip").wanted)
        self.assertTrue(table.entry("", "WEBRip").wanted)
        self.assertFalse(table.entry("720p", "Remux").wanted)

    def test_best_candidate(self) -> None:
        table = _table()
        candidates = [("720p", "Remux"), ("1080p", "WEBRip"), ("480p", "Remux")]
        self.assertEqual(table.best(candidates).names[:2], ("720p", "Remux"))
        self.assertEqual(
            table.best([("720p", "Remux", "x264"), ("1080p", "", "x264")]).total, 135
        )
        self.assertEqual(
            table.best([("720p", "Remux", "x264"), ("1080p", "", "")], wanted_only=True).total,
            100,
        )
        self.assertIsNone(table.best([("480p", "Remux")]))

    def test_best_prefers_earlier_candidate_on_tie(self) -> None:
        table = _table()
        best = table.best([("1080p", "WEBRip"), ("1080p", "webrip")])
        self.assertEqual(best.total, 120)
        self.assertIsNone(table.best([("720p", "Remux")], wanted_only=True))


if __name__ == "__main__":
    unittest.main()
