#!/usr/bin/env python3
"""
Assignment engine - pairs unmatched mentees with mentors.

Three ordered passes over the mentee pool, in stable input order:

1. Preferred: walk each mentee's ordered preference list and take the first
   listed mentor that is approved, has remaining capacity and has not
   already declined this mentee.
2. Algorithm: for each mentee still unplaced, score every mentor with
   remaining capacity and take the best. Ties go to the mentor with the
   lowest current load, then the lowest mentor id.
3. Remainder: mentees with no available mentor are returned unmatched.

Capacity counters live only for the duration of one call, seeded from the
active (pending + accepted) match counts the caller passes in.

Pure and deterministic: identical inputs always yield identical plans.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from core.config_loader import MatchingConfig
from core.scorer import calculate_match_score
from core.matcher.dto import (
    MentorCandidate,
    MenteeCandidate,
    PlannedMatch,
    AssignmentPlan,
)
from database.models import MATCH_TYPE_PREFERRED, MATCH_TYPE_ALGORITHM

logger = logging.getLogger(__name__)


class _CapacityLedger:
    """In-memory mentor load for a single assignment run."""

    def __init__(self, mentors: Iterable[MentorCandidate], committed: Mapping[str, int]):
        self.capacity = {m.registration_id: m.capacity for m in mentors}
        self.load = {rid: int(committed.get(rid, 0)) for rid in self.capacity}

    def has_room(self, mentor: MentorCandidate) -> bool:
        return self.load[mentor.registration_id] < self.capacity[mentor.registration_id]

    def take(self, mentor: MentorCandidate) -> None:
        self.load[mentor.registration_id] += 1

    def current_load(self, mentor: MentorCandidate) -> int:
        return self.load[mentor.registration_id]


def _index_mentors(mentors: Iterable[MentorCandidate]) -> Dict[str, MentorCandidate]:
    # Preference lists may reference a mentor by user id or registration id
    index: Dict[str, MentorCandidate] = {}
    for mentor in mentors:
        index.setdefault(str(mentor.registration_id), mentor)
        index.setdefault(str(mentor.user_id), mentor)
    return index


def _preferred_choice(
    mentee: MenteeCandidate,
    mentor_index: Dict[str, MentorCandidate],
    ledger: _CapacityLedger,
    declined: Set[str],
    max_preferences: int
) -> Optional[Tuple[MentorCandidate, int]]:
    for order, ref in enumerate(mentee.preferred_mentors[:max_preferences], start=1):
        mentor = mentor_index.get(str(ref))
        if mentor is None:
            continue
        if mentor.registration_id in declined:
            continue
        if not ledger.has_room(mentor):
            continue
        return mentor, order
    return None


def assign(
    mentees: List[MenteeCandidate],
    mentors: List[MentorCandidate],
    committed: Optional[Mapping[str, int]] = None,
    config: Optional[MatchingConfig] = None,
    declined: Optional[Mapping[str, Set[str]]] = None
) -> AssignmentPlan:
    """
    Plan matches for a pool of unmatched mentees.

    Args:
        mentees: Approved mentees without an active match, in stable order
        mentors: Approved mentors of the programme
        committed: Active match count per mentor registration id
        config: MatchingConfig (weights, preference list length)
        declined: Mentor registration ids that already rejected each
            mentee registration id

    Returns:
        AssignmentPlan with planned matches and the unmatched remainder
    """
    config = config or MatchingConfig()
    committed = committed or {}
    declined = declined or {}

    ledger = _CapacityLedger(mentors, committed)
    mentor_index = _index_mentors(mentors)
    plan = AssignmentPlan()

    # Pass 1: honour explicit preferences
    remaining: List[MenteeCandidate] = []
    for mentee in mentees:
        choice = _preferred_choice(
            mentee,
            mentor_index,
            ledger,
            declined.get(mentee.registration_id, set()),
            config.max_preferred_mentors
        )
        if choice is None:
            remaining.append(mentee)
            continue

        mentor, order = choice
        ledger.take(mentor)
        plan.matches.append(PlannedMatch(
            mentee=mentee,
            mentor=mentor,
            match_type=MATCH_TYPE_PREFERRED,
            score=calculate_match_score(mentor, mentee, config.weights),
            preferred_choice_order=order
        ))

    # Pass 2: best algorithmic fit among mentors with room
    for mentee in remaining:
        excluded = declined.get(mentee.registration_id, set())
        best = None
        best_key = None
        for mentor in mentors:
            if mentor.registration_id in excluded or not ledger.has_room(mentor):
                continue
            score = calculate_match_score(mentor, mentee, config.weights)
            key = (-score.total, ledger.current_load(mentor), str(mentor.user_id), str(mentor.registration_id))
            if best_key is None or key < best_key:
                best, best_key = (mentor, score), key

        # Pass 3: nothing left for this mentee
        if best is None:
            plan.unmatched.append(mentee)
            continue

        mentor, score = best
        ledger.take(mentor)
        plan.matches.append(PlannedMatch(
            mentee=mentee,
            mentor=mentor,
            match_type=MATCH_TYPE_ALGORITHM,
            score=score
        ))

    logger.info(
        f"Assignment planned {len(plan.matches)} matches "
        f"({plan.preferred_count} preferred, {plan.algorithm_count} algorithm), "
        f"{len(plan.unmatched)} unmatched"
    )
    return plan
