#!/usr/bin/env python3
"""
Domain exceptions for the matching engine.

Every error is user-facing: it carries a stable ``code``, a readable
message and the HTTP status the web layer should answer with.
"""


class MatchingError(Exception):
    """Base exception for matching and match-lifecycle errors."""
    code = "MATCH_000"
    status_code = 400
    default_message = "Matching error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ProgramNotFound(MatchingError):
    code = "PROGRAM_404"
    status_code = 404
    default_message = "Program not found"


class MatchNotFound(MatchingError):
    code = "MATCH_404"
    status_code = 404
    default_message = "Match not found"


class MatchingClosed(MatchingError):
    code = "MATCH_001"
    default_message = "Matching deadline has passed. Cannot approve or initiate matching"


class MatchingNotReady(MatchingError):
    code = "MATCH_002"
    default_message = "Matching cannot be initiated until registration periods are closed"


class MentorNotApproved(MatchingError):
    code = "MATCH_005"
    default_message = "Selected mentor has not been approved"


class MenteeNotApproved(MatchingError):
    code = "MATCH_006"
    default_message = "Mentee has not been approved"


class AlreadyMatched(MatchingError):
    code = "MATCH_007"
    status_code = 409
    default_message = "Mentee already has an active match in this program"


class MentorCapacityExceeded(MatchingError):
    code = "MATCH_008"
    status_code = 409
    default_message = "Mentor has reached the maximum number of mentees for this program"


class MatchExpired(MatchingError):
    code = "MATCH_009"
    status_code = 410
    default_message = "The acceptance window for this match has passed"


class InvalidMatchState(MatchingError):
    code = "MATCH_010"
    status_code = 409
    default_message = "Match is not in pending status"


class InvalidMatchAction(MatchingError):
    code = "MATCH_011"
    default_message = "Action must be 'accept' or 'reject'"


class RejectionReasonTooShort(MatchingError):
    code = "REJECT_002"
    default_message = "Rejection reason must be at least 10 characters"
