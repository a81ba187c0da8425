"""
Database-backed test case and factories for matching tests.

Every test gets a fresh schema; rows are created with strictly increasing
created_at so registration order (the engine's input order) is the order
in which a test creates them.
"""

import itertools
import unittest
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker

from core.config_loader import MatchingConfig
from database.models import (
    AlumniProfile,
    MentoringProgram,
    MentorMenteeMatch,
    MentorRegistration,
    MenteeRegistration,
    Tenant,
    User,
    STATUS_PENDING,
    MATCH_TYPE_ALGORITHM,
)
from tests import create_test_engine, setup_test_database, teardown_test_database

# Relative to the wall clock: API routes run on the real current time
NOW = datetime.now(timezone.utc).replace(microsecond=0)


class MatchingDbTestCase(unittest.TestCase):
    """TestCase with a fresh database, a session and row factories."""

    def setUp(self):
        self.engine = self.make_engine()
        setup_test_database(self.engine)
        self.Session = sessionmaker(bind=self.engine, autoflush=False)
        self.db = self.Session()
        self.now = NOW
        self.config = MatchingConfig()
        self._seq = itertools.count(1)
        self.tenant = Tenant(name="Test University")
        self.db.add(self.tenant)
        self.db.commit()

    def make_engine(self):
        return create_test_engine()

    def tearDown(self):
        self.db.close()
        teardown_test_database(self.engine)
        self.engine.dispose()

    def _next_created_at(self):
        return self.now - timedelta(days=30) + timedelta(seconds=next(self._seq))

    def make_program(self, **overrides):
        values = dict(
            tenant_id=self.tenant.id,
            name="Spring Mentoring 2026",
            status="published",
            registration_end_date_mentor=self.now - timedelta(days=2),
            registration_end_date_mentee=self.now - timedelta(days=1),
            matching_end_date=self.now + timedelta(days=30),
        )
        values.update(overrides)
        program = MentoringProgram(**values)
        self.db.add(program)
        self.db.commit()
        return program

    def make_user(self, first_name, last_name="Test", industry=None, company=None,
                  programme=None, skills=None):
        n = next(self._seq)
        user = User(
            tenant_id=self.tenant.id,
            email=f"{first_name.lower()}.{n}@example.edu",
            first_name=first_name,
            last_name=last_name,
        )
        user.profile = AlumniProfile(
            industry=industry,
            current_company=company,
            programme=programme,
            skills=list(skills or []),
        )
        self.db.add(user)
        self.db.flush()
        return user

    def make_mentor(self, program, name="Mentor", status="approved", max_mentees=None,
                    areas=None, **profile):
        user = self.make_user(name, **profile)
        registration = MentorRegistration(
            program_id=program.id,
            tenant_id=self.tenant.id,
            user_id=user.id,
            status=status,
            preferred_name=name,
            areas_of_mentoring=list(areas or []),
            max_mentees=max_mentees,
            created_at=self._next_created_at(),
        )
        self.db.add(registration)
        self.db.commit()
        return registration

    def make_mentee(self, program, name="Mentee", status="approved", preferred=None,
                    areas=None, with_user=True, user=None, **profile):
        if user is None and with_user:
            user = self.make_user(name, **profile)
        registration = MenteeRegistration(
            program_id=program.id,
            tenant_id=self.tenant.id,
            user_id=user.id if user else None,
            status=status,
            first_name=name,
            last_name="Test",
            personal_email=f"{name.lower()}@mail.example.com",
            areas_of_mentoring=list(areas or []),
            preferred_mentors=[str(ref) for ref in (preferred or [])],
            created_at=self._next_created_at(),
        )
        self.db.add(registration)
        self.db.commit()
        return registration

    def make_match(self, program, mentee, mentor, status=STATUS_PENDING,
                   match_type=MATCH_TYPE_ALGORITHM, score=50.0, matched_at=None,
                   auto_reject_at=None, **extra):
        matched_at = matched_at or self.now
        match = MentorMenteeMatch(
            program_id=program.id,
            tenant_id=self.tenant.id,
            mentor_id=mentor.user_id,
            mentee_id=mentee.mentee_id,
            mentor_registration_id=mentor.id,
            mentee_registration_id=mentee.id,
            status=status,
            match_type=match_type,
            match_score=score,
            matched_at=matched_at,
            auto_reject_at=auto_reject_at or matched_at + timedelta(days=3),
            **extra
        )
        self.db.add(match)
        self.db.commit()
        return match
