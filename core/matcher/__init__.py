from core.matcher.engine import assign
from core.matcher.dto import MentorCandidate, MenteeCandidate, PlannedMatch, AssignmentPlan
from core.matcher.service import MatchingService, MatchingRunResult
from core.matcher.lifecycle import (
    MatchLifecycleService,
    MentorRequest,
    MentorMentee,
    MenteeMatchStatus,
    AUTO_REJECT_REASON,
)
from core.matcher.statistics import StatisticsReporter, MatchStatistics, MatchListing

__all__ = [
    'assign',
    'MentorCandidate',
    'MenteeCandidate',
    'PlannedMatch',
    'AssignmentPlan',
    'MatchingService',
    'MatchingRunResult',
    'MatchLifecycleService',
    'MentorRequest',
    'MentorMentee',
    'MenteeMatchStatus',
    'AUTO_REJECT_REASON',
    'StatisticsReporter',
    'MatchStatistics',
    'MatchListing',
]
