"""Unit tests for Pydantic models."""

import unittest
from datetime import datetime, timezone

from pydantic import ValidationError

from models import (
    BatchPlan,
    ContentCandidate,
    DeliveryHistoryRow,
    GeographyContext,
    PersonalizedMessage,
    Recipient,
    SendJob,
    SubscriberProfile,
    TargetingResult,
    TargetingTier,
)
from tests.fixtures.content_factory import create_test_content_row


class TestGeographyContext(unittest.TestCase):
    """Tests for GeographyContext."""

    def test_state_uppercased(self):
        geo = GeographyContext(state=" oh ")

        self.assertEqual(geo.state, "OH")

    def test_blank_fields_become_none(self):
        geo = GeographyContext(state="", county_fips="  ", place=None)

        self.assertIsNone(geo.state)
        self.assertIsNone(geo.county_fips)
        self.assertTrue(geo.is_empty)

    def test_county_fips_keeps_leading_zero(self):
        geo = GeographyContext(county_fips="01001")

        self.assertEqual(geo.county_fips, "01001")


class TestContentCandidate(unittest.TestCase):
    """Tests for ContentCandidate row mapping."""

    def test_lifts_metadata(self):
        row = create_test_content_row(
            ocd_scope="state:oh", priority=7, audience_rule='{"any": []}'
        )

        candidate = ContentCandidate.from_row(row)

        self.assertEqual(candidate.scope, "state:oh")
        self.assertEqual(candidate.priority, 7)
        self.assertEqual(candidate.audience_rule, '{"any": []}')
        self.assertTrue(candidate.has_scope)
        self.assertTrue(candidate.has_audience_rule)

    def test_missing_metadata(self):
        row = create_test_content_row(metadata=None)

        candidate = ContentCandidate.from_row(row)

        self.assertEqual(candidate.metadata, {})
        self.assertIsNone(candidate.priority)
        self.assertFalse(candidate.has_audience_rule)

    def test_bad_priority_becomes_none(self):
        for value in ["soon", float("nan"), float("inf"), True, [1]]:
            with self.subTest(value=value):
                row = create_test_content_row(priority=value)
                self.assertIsNone(ContentCandidate.from_row(row).priority)

    def test_fractional_priority_kept(self):
        row = create_test_content_row(priority="1.5")

        self.assertEqual(ContentCandidate.from_row(row).priority, 1.5)

    def test_stored_rule_presence(self):
        """Any stored rule counts as present, even an empty dict or list."""
        for rule in [{}, [], {"any": []}, "{}", "state == 'OH'"]:
            with self.subTest(rule=rule):
                row = create_test_content_row(audience_rule=rule)
                self.assertTrue(ContentCandidate.from_row(row).has_audience_rule)

        for rule in [None, "", "   "]:
            with self.subTest(rule=rule):
                row = create_test_content_row(metadata={"audience_rule": rule})
                self.assertFalse(ContentCandidate.from_row(row).has_audience_rule)

    def test_created_at_parsed_to_utc(self):
        row = create_test_content_row(created_at="2026-01-24T07:00:00-05:00")

        candidate = ContentCandidate.from_row(row)

        self.assertEqual(candidate.created_at, datetime(2026, 1, 24, 12, 0, tzinfo=timezone.utc))

    def test_bad_created_at_becomes_none(self):
        row = create_test_content_row(created_at="not a date")

        self.assertIsNone(ContentCandidate.from_row(row).created_at)

    def test_blank_scope_is_global(self):
        row = create_test_content_row(ocd_scope="   ")

        self.assertFalse(ContentCandidate.from_row(row).has_scope)

    def test_candidate_is_read_only(self):
        candidate = ContentCandidate.from_row(create_test_content_row())

        with self.assertRaises(ValidationError):
            candidate.subject = "changed"


class TestTargetingResult(unittest.TestCase):
    """Tests for TargetingResult defaults."""

    def test_default_result(self):
        result = TargetingResult()

        self.assertEqual(result.tier, TargetingTier.default)
        self.assertIsNone(result.content_id)

    def test_content_id_from_selection(self):
        candidate = ContentCandidate.from_row(create_test_content_row(id="content-1"))

        result = TargetingResult(selected=candidate, tier=TargetingTier.global_)

        self.assertEqual(result.content_id, "content-1")


class TestSendModels(unittest.TestCase):
    """Tests for send bookkeeping models."""

    def test_recipient_email_lowercased(self):
        self.assertEqual(Recipient(email=" Test@Example.com ").email, "test@example.com")

    def test_recipient_email_validated(self):
        for email in ["ab", "not-an-email", "a@b"]:
            with self.subTest(email=email):
                with self.assertRaises(ValidationError):
                    Recipient(email=email)

    def test_history_status_validated(self):
        with self.assertRaises(ValidationError):
            DeliveryHistoryRow(email="a@example.com", status="bounced")

    def test_batch_plan_counts_non_negative(self):
        with self.assertRaises(ValidationError):
            BatchPlan(selected=-1, deduped=0, queued=0)

    def test_send_job_status_validated(self):
        SendJob(id="job-1", status="running")

        with self.assertRaises(ValidationError):
            SendJob(id="job-1", status="exploded")

    def test_personalized_message_defaults(self):
        message = PersonalizedMessage(email="a@example.com", subject="S", html="<p>x</p>", text="x")

        self.assertEqual(message.tier, TargetingTier.default)


class TestSubscriberProfile(unittest.TestCase):
    """Tests for SubscriberProfile."""

    def test_null_ocd_ids(self):
        profile = SubscriberProfile(user_id="u1", email="A@Example.com", ocd_ids=None)

        self.assertEqual(profile.ocd_ids, [])
        self.assertEqual(profile.email, "a@example.com")

    def test_invalid_email(self):
        with self.assertRaises(ValidationError):
            SubscriberProfile(user_id="u1", email="not-an-email")


if __name__ == "__main__":
    unittest.main()
