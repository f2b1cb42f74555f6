from __future__ import annotations

import itertools
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
import api_guard_core as api_guard  # noqa: E402


def make_snapshot(symbols: dict[str, str]) -> api_guard.Snapshot:
    return api_guard.Snapshot(target="Demo", created_at="2026-01-01T00:00:00Z", symbols=symbols)


def decide(old: dict[str, str], new: dict[str, str], mode: str, fail_on_additions: bool) -> api_guard.Decision:
    diff = api_guard.diff_snapshots(make_snapshot(old), make_snapshot(new))
    return api_guard.evaluate_policy("Demo", diff, mode, fail_on_additions)


BASE = {"S1:foo": "func foo()"}


class DiffEngineTests(unittest.TestCase):
    def test_added_removed_changed_are_sorted(self) -> None:
        old = make_snapshot({"s:c": "func c()", "s:a": "func a()", "s:z": "func z()", "s:m": "func m()"})
        new = make_snapshot({"s:z": "func z(x: Int)", "s:y": "func y()", "s:b": "func b()", "s:m": "func m()", "s:c": "func c(_:)"})
        diff = api_guard.diff_snapshots(old, new)

        self.assertEqual(diff.added, ("s:b", "s:y"))
        self.assertEqual(diff.removed, ("s:a",))
        self.assertEqual(diff.changed, ("s:c", "s:z"))
        self.assertTrue(diff.has_breaking)
        self.assertFalse(diff.is_empty)

    def test_identical_snapshots_have_empty_diff(self) -> None:
        snapshot = make_snapshot({"s:a": "func a()", "s:b": "func b()"})
        diff = api_guard.diff_snapshots(snapshot, snapshot)
        self.assertEqual(diff, api_guard.ApiDiff())
        self.assertTrue(diff.is_empty)

    def test_added_and_removed_are_mirror_images(self) -> None:
        samples = [
            {},
            {"s:a": "func a()"},
            {"s:a": "func a(x: Int)", "s:b": "func b()"},
            {"s:b": "func b()", "s:c": "var c: Int"},
        ]
        for left, right in itertools.product(samples, repeat=2):
            with self.subTest(left=left, right=right):
                forward = api_guard.diff_snapshots(make_snapshot(left), make_snapshot(right))
                backward = api_guard.diff_snapshots(make_snapshot(right), make_snapshot(left))
                self.assertEqual(set(forward.added), set(backward.removed))
                self.assertEqual(set(forward.removed), set(backward.added))
                self.assertEqual(set(forward.changed), set(backward.changed))

    def test_comparison_ignores_creation_timestamp(self) -> None:
        old = api_guard.Snapshot(target="Demo", created_at="2020-01-01T00:00:00Z", symbols=dict(BASE))
        new = api_guard.Snapshot(target="Demo", created_at="2026-01-01T00:00:00Z", symbols=dict(BASE))
        self.assertTrue(api_guard.diff_snapshots(old, new).is_empty)


class PolicyEvaluatorTests(unittest.TestCase):
    def test_addition_passes_semver_unless_additions_forbidden(self) -> None:
        new = {"S1:foo": "func foo()", "S1:bar": "func bar()"}

        self.assertTrue(decide(BASE, new, "semver", False).passed)

        forbidden = decide(BASE, new, "semver", True)
        self.assertFalse(forbidden.passed)
        self.assertEqual(forbidden.violation, api_guard.VIOLATION_BREAKING_CHANGE)

        strict = decide(BASE, new, "strict", False)
        self.assertFalse(strict.passed)
        self.assertEqual(strict.violation, api_guard.VIOLATION_STRICT)

    def test_signature_change_fails_in_every_mode(self) -> None:
        new = {"S1:foo": "func foo(x: Int)"}
        for mode, fail_on_additions in itertools.product(api_guard.MODES, [False, True]):
            with self.subTest(mode=mode, fail_on_additions=fail_on_additions):
                decision = decide(BASE, new, mode, fail_on_additions)
                self.assertFalse(decision.passed)
                self.assertEqual(decision.diff.changed, ("S1:foo",))

    def test_removal_fails_in_every_mode(self) -> None:
        for mode, fail_on_additions in itertools.product(api_guard.MODES, [False, True]):
            with self.subTest(mode=mode, fail_on_additions=fail_on_additions):
                decision = decide(BASE, {}, mode, fail_on_additions)
                self.assertFalse(decision.passed)
                self.assertEqual(decision.diff.removed, ("S1:foo",))

    def test_identical_snapshots_pass_in_every_mode(self) -> None:
        for mode, fail_on_additions in itertools.product(api_guard.MODES, [False, True]):
            with self.subTest(mode=mode, fail_on_additions=fail_on_additions):
                decision = decide(BASE, dict(BASE), mode, fail_on_additions)
                self.assertTrue(decision.passed)
                self.assertIsNone(decision.violation)
                self.assertEqual(decision.status, "pass")

    def test_passing_report_still_lists_counts_and_identifiers(self) -> None:
        decision = decide(BASE, {"S1:foo": "func foo()", "S1:bar": "func bar()"}, "semver", False)

        self.assertIn("Target: Demo", decision.report)
        self.assertIn("Removed: 0", decision.report)
        self.assertIn("Changed: 0", decision.report)
        self.assertIn("Added: 1", decision.report)
        self.assertIn("- S1:bar", decision.report)
        self.assertIn("Result: OK", decision.report)

    def test_failing_report_enumerates_breaking_identifiers(self) -> None:
        old = {"s:a": "func a()", "s:b": "func b()"}
        new = {"s:b": "func b(x: Int)"}
        decision = decide(old, new, "semver", False)

        self.assertIn("BREAKING removed: 1", decision.report)
        self.assertIn("    - s:a", decision.report)
        self.assertIn("BREAKING changed: 1", decision.report)
        self.assertIn("    - s:b", decision.report)
        self.assertIn("Result: FAIL (semver mode: breaking API change)", decision.report)

    def test_strict_report_names_strict_mode(self) -> None:
        decision = decide(BASE, {"S1:foo": "func foo()", "S1:bar": "func bar()"}, "strict", False)
        self.assertIn("Result: FAIL (strict mode: any API change is disallowed)", decision.report)

    def test_unknown_mode_is_a_config_error(self) -> None:
        with self.assertRaises(api_guard.ConfigError):
            api_guard.evaluate_policy("Demo", api_guard.ApiDiff(), "lenient", False)

    def test_decision_as_dict_is_encodable(self) -> None:
        decision = decide(BASE, {}, "semver", False)
        payload = api_guard.decode(api_guard.encode(decision.as_dict()))
        self.assertEqual(payload["status"], "fail")
        self.assertEqual(payload["removed_symbols"], ["S1:foo"])
        self.assertEqual(payload["violation"], "breaking_change")


class AggregateSummaryTests(unittest.TestCase):
    def test_counts_passes_failures_and_errors(self) -> None:
        passing = decide(BASE, dict(BASE), "semver", False)
        failing = decide(BASE, {"S1:bar": "func bar()"}, "semver", False)
        summary = api_guard.build_aggregate_summary([passing, failing], {"Other": "baseline missing"})

        self.assertEqual(
            summary,
            {
                "target_count": 3,
                "pass_count": 1,
                "fail_count": 1,
                "error_count": 1,
                "added_count": 1,
                "removed_count": 1,
                "changed_count": 0,
            },
        )


if __name__ == "__main__":
    unittest.main()
