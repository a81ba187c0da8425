#!/usr/bin/env python3
"""
Tests for the match acceptance state machine and the auto-reject sweep.
"""

import unittest
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from core.config_loader import MatchingConfig
from core.errors import (
    InvalidMatchAction,
    InvalidMatchState,
    MatchExpired,
    MatchNotFound,
    MenteeNotApproved,
    MentorCapacityExceeded,
    ProgramNotFound,
    RejectionReasonTooShort,
)
from core.matcher import MatchLifecycleService, MatchingService, AUTO_REJECT_REASON
from core.utils import as_utc
from database.models import (
    STATUS_ACCEPTED,
    STATUS_AUTO_REJECTED,
    STATUS_PENDING,
    STATUS_REJECTED,
)
from tests.fixtures.matching_fixtures import MatchingDbTestCase


class LifecycleTestCase(MatchingDbTestCase):

    def setUp(self):
        super().setUp()
        self.program = self.make_program()
        self.lifecycle = MatchLifecycleService(self.db, self.config)
        self.mentor = self.make_mentor(self.program, name="Ada", max_mentees=3)
        self.mentee = self.make_mentee(self.program, name="Lin")
        self.match = self.make_match(self.program, self.mentee, self.mentor)


class TestRespond(LifecycleTestCase):

    def test_accept_within_window(self):
        match = self.lifecycle.respond(self.match.id, "accept", now=self.now + timedelta(days=1))
        self.assertEqual(match.status, STATUS_ACCEPTED)
        self.assertEqual(as_utc(match.responded_at), self.now + timedelta(days=1))
        self.assertIsNone(match.rejection_reason)

    def test_accept_exactly_at_deadline(self):
        match = self.lifecycle.respond(self.match.id, "ACCEPT", now=self.now + timedelta(days=3))
        self.assertEqual(match.status, STATUS_ACCEPTED)

    def test_accept_after_deadline_expires(self):
        with self.assertRaises(MatchExpired):
            self.lifecycle.respond(self.match.id, "accept", now=self.now + timedelta(days=3, seconds=1))
        self.db.refresh(self.match)
        self.assertEqual(self.match.status, STATUS_PENDING)

    def test_reject_stores_reason_verbatim(self):
        match = self.lifecycle.respond(self.match.id, "reject", "Not available this term",
                                       now=self.now + timedelta(hours=2))
        self.assertEqual(match.status, STATUS_REJECTED)
        self.assertEqual(match.rejection_reason, "Not available this term")

    def test_reject_reason_too_short(self):
        for reason in (None, "", "busy", "   short   "):
            with self.assertRaises(RejectionReasonTooShort):
                self.lifecycle.respond(self.match.id, "reject", reason, now=self.now)
        self.db.refresh(self.match)
        self.assertEqual(self.match.status, STATUS_PENDING)

    def test_reason_minimum_is_configurable(self):
        lifecycle = MatchLifecycleService(self.db, MatchingConfig(rejection_reason_min_length=3))
        match = lifecycle.respond(self.match.id, "reject", "busy", now=self.now)
        self.assertEqual(match.status, STATUS_REJECTED)

    def test_terminal_matches_cannot_change(self):
        self.lifecycle.respond(self.match.id, "accept", now=self.now)
        with self.assertRaises(InvalidMatchState):
            self.lifecycle.respond(self.match.id, "reject", "Changed my mind entirely", now=self.now)
        with self.assertRaises(InvalidMatchState):
            self.lifecycle.respond(self.match.id, "accept", now=self.now)

    def test_unknown_action(self):
        with self.assertRaises(InvalidMatchAction):
            self.lifecycle.respond(self.match.id, "maybe", now=self.now)

    def test_unknown_match(self):
        with self.assertRaises(MatchNotFound):
            self.lifecycle.respond("8f14e45f-ceea-4e7a-9f3b-1c2d3e4f5a6b", "accept", now=self.now)
        with self.assertRaises(MatchNotFound):
            self.lifecycle.respond("garbage", "accept", now=self.now)

    def test_accept_rechecks_capacity(self):
        mentor = self.make_mentor(self.program, name="Solo", max_mentees=1)
        self.make_match(self.program, self.make_mentee(self.program), mentor, status=STATUS_ACCEPTED)
        pending = self.make_match(self.program, self.make_mentee(self.program), mentor)

        with self.assertRaises(MentorCapacityExceeded):
            self.lifecycle.respond(pending.id, "accept", now=self.now)

    def test_accept_respects_zero_capacity_hint(self):
        mentor = self.make_mentor(self.program, name="Closed", max_mentees=0)
        pending = self.make_match(self.program, self.make_mentee(self.program), mentor)

        with self.assertRaises(MentorCapacityExceeded):
            self.lifecycle.respond(pending.id, "accept", now=self.now)
        self.db.refresh(pending)
        self.assertEqual(pending.status, STATUS_PENDING)


class TestSweep(LifecycleTestCase):

    def test_expired_pending_matches_are_auto_rejected(self):
        swept = self.lifecycle.sweep_expired_matches(now=self.now + timedelta(days=4))

        self.assertEqual(swept, 1)
        self.db.refresh(self.match)
        self.assertEqual(self.match.status, STATUS_AUTO_REJECTED)
        self.assertEqual(self.match.rejection_reason, AUTO_REJECT_REASON)

    def test_sweep_is_idempotent(self):
        later = self.now + timedelta(days=4)
        self.assertEqual(self.lifecycle.sweep_expired_matches(now=later), 1)
        self.assertEqual(self.lifecycle.sweep_expired_matches(now=later), 0)

    def test_matches_inside_window_are_untouched(self):
        self.assertEqual(self.lifecycle.sweep_expired_matches(now=self.now + timedelta(days=2)), 0)
        self.db.refresh(self.match)
        self.assertEqual(self.match.status, STATUS_PENDING)

    def test_answered_matches_are_untouched(self):
        self.lifecycle.respond(self.match.id, "accept", now=self.now)
        self.assertEqual(self.lifecycle.sweep_expired_matches(now=self.now + timedelta(days=10)), 0)

    def test_sweep_scoped_to_program(self):
        other_program = self.make_program(name="Autumn")
        other = self.make_match(other_program, self.make_mentee(other_program),
                                self.make_mentor(other_program))
        later = self.now + timedelta(days=4)

        self.assertEqual(self.lifecycle.sweep_expired_matches(program_id=str(other_program.id), now=later), 1)
        self.db.refresh(self.match)
        self.db.refresh(other)
        self.assertEqual(self.match.status, STATUS_PENDING)
        self.assertEqual(other.status, STATUS_AUTO_REJECTED)

    def test_failing_row_is_skipped(self):
        second = self.make_match(self.program, self.make_mentee(self.program), self.mentor)
        bad_id = self.match.id
        real_get = self.lifecycle.repo.matches.get_for_update

        def flaky(match_id):
            if match_id == bad_id:
                raise OperationalError("SELECT", {}, Exception("corrupt row"))
            return real_get(match_id)

        with patch.object(self.lifecycle.repo.matches, "get_for_update", side_effect=flaky):
            swept = self.lifecycle.sweep_expired_matches(now=self.now + timedelta(days=4))

        self.assertEqual(swept, 1)
        self.db.refresh(second)
        self.assertEqual(second.status, STATUS_AUTO_REJECTED)
        self.db.refresh(self.match)
        self.assertEqual(self.match.status, STATUS_PENDING)

    def test_late_accept_then_sweep_then_invalid_state(self):
        late = self.now + timedelta(days=3, hours=1)
        with self.assertRaises(MatchExpired):
            self.lifecycle.respond(self.match.id, "accept", now=late)

        self.assertEqual(self.lifecycle.sweep_expired_matches(now=late), 1)
        self.db.refresh(self.match)
        self.assertEqual(self.match.status, STATUS_AUTO_REJECTED)

        with self.assertRaises(InvalidMatchState):
            self.lifecycle.respond(self.match.id, "accept", now=late)

    def test_auto_rejected_mentee_is_matched_again(self):
        replacement = self.make_mentor(self.program, name="Grace")
        later = self.now + timedelta(days=4)
        self.lifecycle.sweep_expired_matches(now=later)

        result = MatchingService(self.db, self.config).run_matching(self.program.id, now=later)

        self.assertEqual([m.mentee_registration_id for m in result.created], [self.mentee.id])
        self.assertEqual(result.created[0].mentor_registration_id, replacement.id)


class TestMentorRequests(LifecycleTestCase):

    def test_lists_pending_requests_with_days_remaining(self):
        requests = self.lifecycle.list_mentor_requests(self.mentor.user_id, now=self.now + timedelta(hours=12))

        self.assertEqual(len(requests), 1)
        request = requests[0]
        self.assertEqual(request.match.id, self.match.id)
        self.assertEqual(request.days_remaining, 3)
        self.assertEqual(request.mentee_name, "Lin Test")
        self.assertEqual(request.program_name, "Spring Mentoring 2026")

    def test_expired_requests_are_swept_before_listing(self):
        requests = self.lifecycle.list_mentor_requests(self.mentor.user_id, now=self.now + timedelta(days=5))
        self.assertEqual(requests, [])
        self.db.refresh(self.match)
        self.assertEqual(self.match.status, STATUS_AUTO_REJECTED)

    def test_other_mentors_see_nothing(self):
        other = self.make_mentor(self.program, name="Grace")
        self.assertEqual(self.lifecycle.list_mentor_requests(other.user_id, now=self.now), [])


class TestMentorMentees(LifecycleTestCase):

    def test_pending_and_accepted_mentees_newest_first(self):
        accepted = self.make_match(self.program, self.make_mentee(self.program, name="Kim"), self.mentor,
                                   status=STATUS_ACCEPTED, matched_at=self.now - timedelta(days=1))
        self.make_match(self.program, self.make_mentee(self.program, name="Ola"), self.mentor,
                        status=STATUS_REJECTED, rejection_reason="Not available this term")

        mentees = self.lifecycle.list_mentor_mentees(self.program.id, self.mentor.user_id, now=self.now)

        self.assertEqual([m.match.id for m in mentees], [self.match.id, accepted.id])
        self.assertEqual(mentees[0].registration.id, self.mentee.id)
        self.assertEqual(mentees[0].registration.full_name, "Lin Test")
        self.assertEqual(mentees[0].program_name, "Spring Mentoring 2026")

    def test_expired_requests_drop_out(self):
        mentees = self.lifecycle.list_mentor_mentees(self.program.id, self.mentor.user_id,
                                                     now=self.now + timedelta(days=5))
        self.assertEqual(mentees, [])

    def test_scoped_to_program_and_mentor(self):
        other_program = self.make_program(name="Autumn Mentoring 2026")
        self.assertEqual(self.lifecycle.list_mentor_mentees(other_program.id, self.mentor.user_id, now=self.now), [])
        other = self.make_mentor(self.program, name="Grace")
        self.assertEqual(self.lifecycle.list_mentor_mentees(self.program.id, other.user_id, now=self.now), [])

    def test_unknown_program(self):
        with self.assertRaises(ProgramNotFound):
            self.lifecycle.list_mentor_mentees("8f14e45f-ceea-4e7a-9f3b-1c2d3e4f5a6b", self.mentor.user_id)


class TestMenteeStatus(LifecycleTestCase):

    def test_current_match_and_history(self):
        self.lifecycle.respond(self.match.id, "reject", "Not available this term", now=self.now)
        replacement = self.make_match(self.program, self.mentee, self.make_mentor(self.program, name="Grace"),
                                      matched_at=self.now + timedelta(hours=1))

        status = self.lifecycle.get_mentee_status(self.program.id, self.mentee.id, now=self.now)

        self.assertEqual(status.current_match.id, replacement.id)
        self.assertEqual([m.id for m in status.history], [replacement.id, self.match.id])
        self.assertEqual(status.registration_status, "approved")

    def test_lookup_by_user_id(self):
        status = self.lifecycle.get_mentee_status(self.program.id, self.mentee.user_id, now=self.now)
        self.assertEqual(status.registration_id, str(self.mentee.id))

    def test_unknown_mentee_and_program(self):
        with self.assertRaises(MenteeNotApproved):
            self.lifecycle.get_mentee_status(self.program.id, "8f14e45f-ceea-4e7a-9f3b-1c2d3e4f5a6b")
        with self.assertRaises(ProgramNotFound):
            self.lifecycle.get_mentee_status("8f14e45f-ceea-4e7a-9f3b-1c2d3e4f5a6b", self.mentee.id)


if __name__ == '__main__':
    unittest.main()
