#!/usr/bin/env python3
"""
Scoring Module - mentor/mentee compatibility.

Public API:
- calculate_match_score: weighted compatibility score in [0, 100]
- ScoreBreakdown: per-criterion sub-scores plus the weighted total

Modules:
- models.py: ScoreBreakdown
- taxonomy.py: industry and programme graded matching
- compatibility.py: skills / preference sub-scores and the weighted sum
"""

from core.scorer.models import ScoreBreakdown
from core.scorer.compatibility import calculate_match_score

__all__ = ['calculate_match_score', 'ScoreBreakdown']
