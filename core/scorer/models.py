#!/usr/bin/env python3
"""
Scoring Models - Data structures for compatibility results.
"""

from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class ScoreBreakdown:
    """Sub-scores (each 0-100) and their weighted total."""
    industry: float = 0.0
    programme: float = 0.0
    skills: float = 0.0
    preference: float = 0.0
    total: float = 0.0

    @property
    def is_preferred(self) -> bool:
        return self.preference > 0

    def to_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data.pop('total')
        return data
