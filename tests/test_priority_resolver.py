import unittest

from quality_priority.catalog import AttributeCatalog
from quality_priority.combinations import generate_combinations
from quality_priority.models import Axis, QualityProfile
from quality_priority.resolver import PriorityResolver
from quality_priority.rules import make_rule


def _catalog() -> AttributeCatalog:
    return AttributeCatalog(
        {
            Axis.RESOLUTION: [("1080p", 100), ("720p", 50)],
            Axis.QUALITY: [("Remux", 80), ("WEBRip", 20)],
            Axis.CODEC: [("x265", 15)],
            Axis.AUDIO: [("DTS", -5)],
        },
        profile_priorities={"scoped": {Axis.CODEC: {"x265": 40}}},
    )


def _profile(*rules, name: str = "p", **kwargs) -> QualityProfile:
    return QualityProfile(name=name, reorder=tuple(make_rule(*rule) for rule in rules), **kwargs)


def _resolved(profile: QualityProfile, catalog: AttributeCatalog | None = None) -> dict:
    catalog = catalog or _catalog()
    resolver = PriorityResolver(catalog)
    return {
        combo.names: resolver.resolve(profile, combo)
        for combo in generate_combinations(catalog, profile)
    }


class TestPriorityResolver(unittest.TestCase):
    def test_without_rules_total_is_sum_of_base_priorities(self) -> None:
        catalog = _catalog()
        profile = _profile()
        for names, resolved in _resolved(profile, catalog).items():
            expected = sum(
                catalog.base_priority(axis, name, profile) for axis, name in zip(Axis, names)
            )
            self.assertEqual(resolved.total, expected)
            self.assertEqual(resolved.priorities, resolved.base_priorities)
            self.assertFalse(resolved.override_applied)

    def test_negative_priorities_are_summed(self) -> None:
        resolved = _resolved(_profile())[("720p", "WEBRip", "x265", "DTS")]
        self.assertEqual(resolved.total, 50 + 20 + 15 - 5)

    def test_single_axis_rule_replaces_priority(self) -> None:
        resolved = _resolved(_profile(("1080P", "resolution", 5)))
        for names, item in resolved.items():
            if names[0] == "1080p":
                self.assertEqual(item.priority(Axis.RESOLUTION), 5)
                self.assertTrue(item.override_applied)
            else:
                self.assertEqual(item.priority(Axis.RESOLUTION), item.base_priorities[0])
            self.assertEqual(item.priorities[1:], item.base_priorities[1:])

    def test_single_axis_rule_only_touches_its_axis(self) -> None:
        resolved = _resolved(_profile(("Remux", "quality", 1)))
        item = resolved[("1080p", "Remux", "x265", "DTS")]
        self.assertEqual(item.priorities, (100, 1, 15, -5))
        self.assertEqual(item.total, 111)

    def test_combined_rule_sets_pair_contribution(self) -> None:
        resolved = _resolved(_profile(("1080p,Remux", "combined_res_qual", 999)))
        item = resolved[("1080p", "Remux", "", "")]
        self.assertEqual(item.priorities, (999, 0, 0, 0))
        self.assertEqual(item.total, 999)
        self.assertTrue(item.override_applied)

    def test_combined_rule_ignores_partial_matches(self) -> None:
        resolved = _resolved(_profile(("1080p,Remux", "combined_res_qual", 999)))
        self.assertEqual(resolved[("1080p", "WEBRip", "", "")].total, 120)
        self.assertEqual(resolved[("720p", "Remux", "", "")].total, 130)
        self.assertEqual(resolved[("1080p", "", "", "")].total, 100)
        self.assertFalse(resolved[("1080p", "WEBRip", "", "")].override_applied)

    def test_combined_rule_is_case_insensitive(self) -> None:
        resolved = _resolved(_profile(("1080P , remux", "combined_res_qual", 500)))
        self.assertEqual(resolved[("1080p", "Remux", "", "")].total, 500)

    def test_combined_rule_with_empty_quality_matches_neutral_quality(self) -> None:
        resolved = _resolved(_profile(("1080p,", "combined_res_qual", 999)))
        item = resolved[("1080p", "", "", "")]
        self.assertEqual(item.priorities, (999, 0, 0, 0))
        self.assertTrue(item.override_applied)
        self.assertEqual(resolved[("1080p", "Remux", "", "")].total, 180)
        self.assertEqual(resolved[("", "", "", "")].total, 0)

    def test_malformed_combined_rule_is_skipped(self) -> None:
        with self.assertLogs("quality_priority.rules", level="WARNING"):
            profile = _profile(("1080p", "combined_res_qual", 999))
        resolved = _resolved(profile)
        self.assertEqual(resolved[("1080p", "Remux", "", "")].total, 180)

    def test_last_matching_rule_wins(self) -> None:
        resolved = _resolved(
            _profile(("1080p", "resolution", 5), ("1080p", "resolution", 7))
        )
        self.assertEqual(resolved[("1080p", "", "", "")].total, 7)
        resolved = _resolved(
            _profile(("1080p", "resolution", 7), ("1080p", "resolution", 5))
        )
        self.assertEqual(resolved[("1080p", "", "", "")].total, 5)

    def test_rules_apply_in_declaration_order_across_kinds(self) -> None:
        resolved = _resolved(
            _profile(("1080p,Remux", "combined_res_qual", 999), ("Remux", "quality", 30))
        )
        self.assertEqual(resolved[("1080p", "Remux", "", "")].priorities, (999, 30, 0, 0))
        resolved = _resolved(
            _profile(("Remux", "quality", 30), ("1080p,Remux", "combined_res_qual", 999))
        )
        self.assertEqual(resolved[("1080p", "Remux", "", "")].priorities, (999, 0, 0, 0))

    def test_neutral_value_is_never_overridden(self) -> None:
        with self.assertLogs("quality_priority.rules", level="WARNING"):
            profile = _profile(("", "resolution", 50), (",Remux", "combined_res_qual", 70))
        resolved = _resolved(profile)
        for names, item in resolved.items():
            for axis, name in zip(Axis, names):
                if not name:
                    self.assertEqual(item.priority(axis), 0)

    def test_position_rule_multiplies_axis(self) -> None:
        resolved = _resolved(_profile(("resolution", "position", 3)))
        self.assertEqual(resolved[("1080p", "Remux", "", "")].priorities, (300, 80, 0, 0))
        self.assertEqual(resolved[("", "Remux", "", "")].priorities, (0, 80, 0, 0))

    def test_position_and_replacement_follow_declaration_order(self) -> None:
        resolved = _resolved(
            _profile(("resolution", "position", 2), ("1080p", "resolution", 5))
        )
        self.assertEqual(resolved[("1080p", "", "", "")].total, 5)
        resolved = _resolved(
            _profile(("1080p", "resolution", 5), ("resolution", "position", 2))
        )
        self.assertEqual(resolved[("1080p", "", "", "")].total, 10)

    def test_rule_matching_base_value_is_not_an_override(self) -> None:
        resolved = _resolved(_profile(("1080p", "resolution", 100)))
        self.assertFalse(resolved[("1080p", "", "", "")].override_applied)

    def test_profile_scoped_base_priority(self) -> None:
        resolved = _resolved(_profile(name="scoped"))
        self.assertEqual(resolved[("", "", "x265", "")].total, 40)
        self.assertFalse(resolved[("", "", "x265", "")].override_applied)


class TestCutoffPriority(unittest.TestCase):
    def test_no_cutoff_configured(self) -> None:
        self.assertIsNone(PriorityResolver(_catalog()).cutoff_priority(_profile()))

    def test_cutoff_uses_base_priorities(self) -> None:
        profile = _profile(cutoff_resolution="1080p", cutoff_quality="WEBRip")
        self.assertEqual(PriorityResolver(_catalog()).cutoff_priority(profile), 120)

    def test_cutoff_resolution_only(self) -> None:
        profile = _profile(cutoff_resolution="720p")
        self.assertEqual(PriorityResolver(_catalog()).cutoff_priority(profile), 50)

    def test_cutoff_applies_reorder_rules(self) -> None:
        profile = _profile(
            ("1080p,Remux", "combined_res_qual", 999),
            cutoff_resolution="1080p",
            cutoff_quality="Remux",
        )
        self.assertEqual(PriorityResolver(_catalog()).cutoff_priority(profile), 999)


if __name__ == "__main__":
    unittest.main()
