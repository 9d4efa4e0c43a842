"""
Unit tests for targeting/geo.py

Tests scope normalization, geography extraction from division paths,
and geo_metrics row building.
"""

import unittest

from models import GeographyContext
from targeting.geo import (
    extract_geo_context,
    metric_rows_from_division_paths,
    normalize_scope,
)


class TestNormalizeScope(unittest.TestCase):
    """Tests for normalize_scope()."""

    def test_canonical_path_passthrough(self):
        """Full division path is returned as-is."""
        path = "ocd-division/country:us/state:oh/place:columbus"

        self.assertEqual(normalize_scope(path), [path])

    def test_state_shorthand(self):
        """state:xx becomes a state path."""
        self.assertEqual(
            normalize_scope("state:OH"), ["ocd-division/country:us/state:oh"]
        )

    def test_place_shorthand(self):
        """place:name,st becomes a place-under-state path."""
        self.assertEqual(
            normalize_scope("place:Columbus, OH"),
            ["ocd-division/country:us/state:oh/place:columbus"],
        )

    def test_place_without_state_is_unmatchable(self):
        """place shorthand missing its state yields nothing."""
        self.assertEqual(normalize_scope("place:columbus"), [])
        self.assertEqual(normalize_scope("place:columbus,"), [])
        self.assertEqual(normalize_scope("place:,oh"), [])

    def test_county_fips_shorthand(self):
        """Five-digit county uses the FIPS path form."""
        self.assertEqual(
            normalize_scope("county:39049"),
            ["ocd-division/country:us/state_fips:39/county_fips:39049"],
        )

    def test_county_name_shorthand(self):
        """Non-numeric county uses the name path form."""
        self.assertEqual(
            normalize_scope("county:Franklin,oh"),
            ["ocd-division/country:us/state:oh/county:franklin"],
        )

    def test_county_malformed(self):
        """County name without a state yields nothing."""
        self.assertEqual(normalize_scope("county:franklin"), [])

    def test_unknown_level(self):
        """Unsupported levels yield nothing."""
        self.assertEqual(normalize_scope("cd:oh-03"), [])

    def test_malformed_inputs_never_raise(self):
        """Garbage input degrades to an empty list."""
        for scope in ["", "state", "state:", ":oh", None, 42, ["state:oh"]]:
            with self.subTest(scope=scope):
                self.assertEqual(normalize_scope(scope), [])


class TestExtractGeoContext(unittest.TestCase):
    """Tests for extract_geo_context()."""

    def test_full_columbus_paths(self):
        """State, county FIPS and place are all extracted."""
        geo = extract_geo_context(
            [
                "ocd-division/country:us/state:oh",
                "ocd-division/country:us/state:oh/place:columbus",
                "ocd-division/country:us/state_fips:39/county_fips:39049",
            ]
        )

        self.assertEqual(geo.state, "OH")
        self.assertEqual(geo.county_fips, "39049")
        self.assertEqual(geo.place, "columbus,oh")

    def test_mixed_case_paths(self):
        """Paths are lowercased before scanning."""
        geo = extract_geo_context(["ocd-division/country:us/State:OH/Place:Columbus"])

        self.assertEqual(geo.state, "OH")
        self.assertEqual(geo.place, "columbus,oh")

    def test_place_requires_state(self):
        """Place is dropped when no state segment is present."""
        geo = extract_geo_context(["ocd-division/country:us/place:columbus"])

        self.assertIsNone(geo.place)
        self.assertIsNone(geo.state)

    def test_last_path_wins(self):
        """Conflicting paths resolve to the last one seen."""
        geo = extract_geo_context(
            [
                "ocd-division/country:us/state:oh",
                "ocd-division/country:us/state:mi",
            ]
        )

        self.assertEqual(geo.state, "MI")

    def test_empty_and_none(self):
        """No paths gives an empty context."""
        self.assertEqual(extract_geo_context([]), GeographyContext())
        self.assertEqual(extract_geo_context(None), GeographyContext())
        self.assertTrue(extract_geo_context(None).is_empty)

    def test_state_segment_must_be_two_letters(self):
        """A non-state segment starting with state: is ignored."""
        geo = extract_geo_context(["ocd-division/country:us/state:ohio"])

        self.assertIsNone(geo.state)


class TestMetricRows(unittest.TestCase):
    """Tests for metric_rows_from_division_paths()."""

    def test_rows_for_columbus(self):
        rows = metric_rows_from_division_paths(
            [
                "ocd-division/country:us/state:oh",
                "ocd-division/country:us/state:oh/place:columbus",
            ]
        )

        self.assertEqual(
            rows,
            [
                {"metric_key": "state", "metric_value": "OH"},
                {"metric_key": "place", "metric_value": "columbus,oh"},
            ],
        )

    def test_no_rows_for_unrecognized_paths(self):
        self.assertEqual(metric_rows_from_division_paths(["ocd-division/country:us"]), [])


if __name__ == "__main__":
    unittest.main()
