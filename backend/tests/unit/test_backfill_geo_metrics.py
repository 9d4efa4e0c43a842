"""
Unit tests for sending/backfill_geo_metrics.py
"""

import unittest
from unittest.mock import patch

from sending.backfill_geo_metrics import backfill_geo_metrics, backfill_profile
from tests.fixtures.mock_helpers import create_mock_supabase, create_routed_supabase
from tests.fixtures.subscriber_factory import create_test_profile


class TestBackfillProfile(unittest.TestCase):
    """Tests for backfill_profile()."""

    def test_replaces_metrics(self):
        supabase = create_mock_supabase()

        written = backfill_profile(supabase, create_test_profile(user_id="u1"))

        self.assertEqual(written, 3)
        supabase.delete.assert_called_once()
        supabase.in_.assert_called_with("metric_key", ["state", "county_fips", "place"])
        rows = supabase.insert.call_args.args[0]
        self.assertEqual(
            {(r["metric_key"], r["metric_value"]) for r in rows},
            {("state", "OH"), ("county_fips", "39049"), ("place", "columbus,oh")},
        )
        self.assertTrue(all(r["user_id"] == "u1" and r["source"] == "backfill" for r in rows))

    def test_no_paths_writes_nothing(self):
        supabase = create_mock_supabase()

        written = backfill_profile(supabase, create_test_profile(ocd_ids=[]))

        self.assertEqual(written, 0)
        supabase.delete.assert_not_called()
        supabase.insert.assert_not_called()


@patch("sending.backfill_geo_metrics.get_supabase_client")
class TestBackfillGeoMetrics(unittest.TestCase):
    """Tests for backfill_geo_metrics()."""

    def test_counts(self, mock_client):
        supabase = create_routed_supabase(
            {
                "profiles": [
                    create_test_profile(user_id="u1"),
                    create_test_profile(user_id="u2", ocd_ids=[]),
                ]
            }
        )
        mock_client.return_value = supabase

        stats = backfill_geo_metrics()

        self.assertEqual(stats["processed"], 2)
        self.assertEqual(stats["created"], 3)
        self.assertEqual(stats["skipped"], 1)
        self.assertEqual(stats["errors"], 0)

    def test_dry_run_writes_nothing(self, mock_client):
        supabase = create_routed_supabase({"profiles": [create_test_profile(user_id="u1")]})
        mock_client.return_value = supabase

        stats = backfill_geo_metrics(dry_run=True)

        self.assertEqual(stats["created"], 3)
        self.assertNotIn("geo_metrics", supabase.queries)

    @patch("sending.backfill_geo_metrics.log_send_error")
    def test_write_error_counted(self, mock_log, mock_client):
        supabase = create_routed_supabase(
            {
                "profiles": [create_test_profile(user_id="u1")],
                "geo_metrics": Exception("permission denied"),
            }
        )
        mock_client.return_value = supabase

        stats = backfill_geo_metrics()

        self.assertEqual(stats["errors"], 1)
        mock_log.assert_called_once()

    def test_no_profiles(self, mock_client):
        mock_client.return_value = create_routed_supabase({"profiles": []})

        stats = backfill_geo_metrics()

        self.assertEqual(stats["processed"], 0)


if __name__ == "__main__":
    unittest.main()
