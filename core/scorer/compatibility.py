#!/usr/bin/env python3
"""
Compatibility score between one mentor and one mentee.

score = w_industry * industry + w_programme * programme
      + w_skills * skills + w_preference * preference

Each sub-score is in [0, 100] and the weights sum to 1.0, so the total is
in [0, 100] without further normalisation. A mentee with no preferred
mentors can therefore reach at most 60 with the default weights.

Pure and deterministic: no I/O, no clock.
"""

from typing import Any, Iterable, Optional, Set

from core.config_loader import MatchingWeights
from core.scorer.models import ScoreBreakdown
from core.scorer.taxonomy import industry_score, programme_score, normalize


def _skill_set(values: Optional[Iterable[str]]) -> Set[str]:
    return {normalize(v) for v in (values or []) if normalize(v)}


def skills_score(mentor_skills: Iterable[str], mentee_skills: Iterable[str]) -> float:
    """Share of the mentee's skills the mentor covers, as 0-100."""
    mentee = _skill_set(mentee_skills)
    if not mentee:
        return 0.0
    mentor = _skill_set(mentor_skills)
    return 100.0 * len(mentor & mentee) / len(mentee)


def preference_order(mentor: Any, preferred_mentors: Iterable[str]) -> Optional[int]:
    """1-based position of the mentor in the mentee's list, or None.

    Entries may reference the mentor by user id or registration id.
    """
    mentor_refs = {str(mentor.user_id), str(mentor.registration_id)}
    for position, ref in enumerate(preferred_mentors or [], start=1):
        if str(ref) in mentor_refs:
            return position
    return None


def preference_score(mentor: Any, preferred_mentors: Iterable[str]) -> float:
    return 100.0 if preference_order(mentor, preferred_mentors) is not None else 0.0


def calculate_match_score(mentor: Any, mentee: Any, weights: Optional[MatchingWeights] = None) -> ScoreBreakdown:
    """
    Score a mentor against a mentee.

    Args:
        mentor: MentorCandidate-like (user_id, registration_id, industry,
            company, programme, skills)
        mentee: MenteeCandidate-like (industry, company, programme, skills,
            preferred_mentors)
        weights: Sub-score weights; defaults to MatchingWeights()

    Returns:
        ScoreBreakdown with the total rounded to one decimal.
    """
    weights = weights or MatchingWeights()

    industry = industry_score(mentee.industry, mentee.company, mentor.industry, mentor.company)
    programme = programme_score(mentee.programme, mentor.programme)
    skills = skills_score(mentor.skills, mentee.skills)
    preference = preference_score(mentor, mentee.preferred_mentors)

    total = (
        weights.industry * industry
        + weights.programme * programme
        + weights.skills * skills
        + weights.preference * preference
    )
    total = max(0.0, min(100.0, total))

    return ScoreBreakdown(
        industry=round(industry, 1),
        programme=round(programme, 1),
        skills=round(skills, 1),
        preference=round(preference, 1),
        total=round(total, 1),
    )
