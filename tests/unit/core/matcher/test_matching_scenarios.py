#!/usr/bin/env python3
"""
End-to-end matching scenarios: run, respond, sweep, re-run.
"""

import unittest
from collections import Counter
from datetime import timedelta

from sqlalchemy import select

from core.errors import InvalidMatchState, MatchExpired
from core.matcher import MatchingService, MatchLifecycleService, StatisticsReporter
from database.models import (
    MentorMenteeMatch,
    ACTIVE_STATUSES,
    STATUS_ACCEPTED,
    STATUS_AUTO_REJECTED,
    STATUS_REJECTED,
)
from tests.fixtures.matching_fixtures import MatchingDbTestCase


class ScenarioTestCase(MatchingDbTestCase):

    def setUp(self):
        super().setUp()
        self.program = self.make_program()
        self.matching = MatchingService(self.db, self.config)
        self.lifecycle = MatchLifecycleService(self.db, self.config)
        self.reporter = StatisticsReporter(self.db)

    def all_matches(self):
        return self.db.execute(select(MentorMenteeMatch)).scalars().all()

    def assert_invariants(self, capacities):
        matches = self.all_matches()
        active = Counter(m.mentee_registration_id for m in matches if m.status in ACTIVE_STATUSES)
        self.assertTrue(all(count <= 1 for count in active.values()))
        accepted = Counter(m.mentor_registration_id for m in matches if m.status == STATUS_ACCEPTED)
        for mentor_reg_id, count in accepted.items():
            self.assertLessEqual(count, capacities[mentor_reg_id])


class TestPreferencesWithLimitedCapacity(ScenarioTestCase):

    def test_two_mentors_three_mentees(self):
        mentor1 = self.make_mentor(self.program, name="Mentor1", max_mentees=1)
        mentor2 = self.make_mentor(self.program, name="Mentor2", max_mentees=1)
        mentee1 = self.make_mentee(self.program, name="Mentee1", preferred=[mentor1.user_id])
        mentee2 = self.make_mentee(self.program, name="Mentee2", preferred=[mentor1.user_id, mentor2.user_id])
        mentee3 = self.make_mentee(self.program, name="Mentee3")

        result = self.matching.run_matching(self.program.id, now=self.now)

        created = {m.mentee_registration_id: m for m in result.created}
        self.assertEqual(created[mentee1.id].mentor_registration_id, mentor1.id)
        self.assertEqual(created[mentee1.id].match_type, "preferred")
        self.assertEqual(created[mentee2.id].mentor_registration_id, mentor2.id)
        self.assertEqual(created[mentee2.id].match_type, "preferred")
        self.assertEqual(created[mentee2.id].preferred_choice_order, 2)
        self.assertEqual([r.id for r in result.unmatched], [mentee3.id])

        stats = self.reporter.get_statistics(self.program.id)
        self.assertEqual(stats.total, 2)
        self.assertEqual(stats.unmatched_mentees, 1)
        self.assertEqual(stats.preferred_matches, 2)


class TestRejectionAndRematch(ScenarioTestCase):

    def test_rejected_mentee_returns_to_the_pool(self):
        mentor = self.make_mentor(self.program, name="Ada", max_mentees=1)
        mentee = self.make_mentee(self.program, name="Lin")
        match = self.matching.run_matching(self.program.id, now=self.now).created[0]

        rejected = self.lifecycle.respond(match.id, "reject", "Not available this term", now=self.now)
        self.assertEqual(rejected.status, STATUS_REJECTED)
        self.assertEqual(rejected.rejection_reason, "Not available this term")

        # Ada declined, so with no one else the mentee is unmatched but eligible
        rerun = self.matching.run_matching(self.program.id, now=self.now)
        self.assertEqual([r.id for r in rerun.unmatched], [mentee.id])
        self.assertEqual(rerun.skipped, 0)

        other = self.make_mentor(self.program, name="Grace")
        third = self.matching.run_matching(self.program.id, now=self.now)
        self.assertEqual(third.created[0].mentor_registration_id, other.id)
        self.assertNotEqual(third.created[0].mentor_registration_id, mentor.id)


class TestLateAcceptance(ScenarioTestCase):

    def test_expired_accept_then_sweep(self):
        self.make_mentor(self.program)
        self.make_mentee(self.program)
        match = self.matching.run_matching(self.program.id, now=self.now).created[0]
        late = self.now + timedelta(days=3, minutes=1)

        with self.assertRaises(MatchExpired):
            self.lifecycle.respond(match.id, "accept", now=late)

        self.assertEqual(self.lifecycle.sweep_expired_matches(self.program.id, now=late), 1)
        self.db.refresh(match)
        self.assertEqual(match.status, STATUS_AUTO_REJECTED)

        with self.assertRaises(InvalidMatchState):
            self.lifecycle.respond(match.id, "accept", now=late)


class TestInvariantsAcrossOperations(ScenarioTestCase):

    def test_sequence_of_runs_responses_and_sweeps(self):
        mentors = [self.make_mentor(self.program, name=f"Mentor{i}", max_mentees=2) for i in range(3)]
        capacities = {m.id: 2 for m in mentors}
        for i in range(8):
            self.make_mentee(self.program, name=f"Mentee{i}", preferred=[mentors[i % 3].user_id])

        first = self.matching.run_matching(self.program.id, now=self.now)
        self.assertEqual(len(first.created), 6)
        self.assert_invariants(capacities)

        self.lifecycle.respond(first.created[0].id, "accept", now=self.now)
        self.lifecycle.respond(first.created[1].id, "reject", "Schedule conflict this term", now=self.now)
        self.assert_invariants(capacities)

        later = self.now + timedelta(days=4)
        self.lifecycle.sweep_expired_matches(self.program.id, now=later)
        self.assert_invariants(capacities)

        second = self.matching.run_matching(self.program.id, now=later)
        self.assert_invariants(capacities)
        for match in second.created:
            self.lifecycle.respond(match.id, "accept", now=later)
        self.assert_invariants(capacities)


if __name__ == '__main__':
    unittest.main()
