#!/usr/bin/env python3
"""
Industry and programme matching with graded partial credit.

Industry (0-100):
- 100: same industry, or same company
- 60: both sides fall in the same related-industry family
- 40: industries share a significant word
- 0: otherwise

Programme (0-100):
- 100: same programme after normalisation
- 80: one programme name contains the other
- 60 / 30: two or more / one shared significant word
- 0: otherwise
"""

import re
from typing import Dict, List, Optional

RELATED_INDUSTRIES: Dict[str, List[str]] = {
    "technology": ["software", "it", "tech", "computing", "ai", "data"],
    "finance": ["banking", "investment", "accounting", "consulting"],
    "healthcare": ["medical", "pharmaceutical", "biotech"],
    "education": ["academic", "teaching", "research"],
    "engineering": ["manufacturing", "construction", "automotive"],
}

# Words this short carry no signal ("of", "and", "it")
MIN_SIGNIFICANT_WORD_LENGTH = 4


def normalize(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.lower().strip()


def _significant_words(value: str, pattern: str = r"[\s-]+") -> List[str]:
    return [w for w in re.split(pattern, value) if len(w) >= MIN_SIGNIFICANT_WORD_LENGTH]


def _industry_family(*texts: str) -> set:
    families = set()
    for family, keywords in RELATED_INDUSTRIES.items():
        for text in texts:
            if not text:
                continue
            tokens = set(re.split(r"[\s\-/,&]+", text))
            if family in tokens or any(k in tokens for k in keywords):
                families.add(family)
    return families


def industry_score(
    mentee_industry: Optional[str],
    mentee_company: Optional[str],
    mentor_industry: Optional[str],
    mentor_company: Optional[str],
) -> float:
    mentee_ind = normalize(mentee_industry)
    mentor_ind = normalize(mentor_industry)
    mentee_comp = normalize(mentee_company)
    mentor_comp = normalize(mentor_company)

    if mentee_ind and mentee_ind == mentor_ind:
        return 100.0
    if mentee_comp and mentee_comp == mentor_comp:
        return 100.0

    if _industry_family(mentee_ind, mentee_comp) & _industry_family(mentor_ind, mentor_comp):
        return 60.0

    if mentee_ind and mentor_ind:
        common = set(_significant_words(mentee_ind)) & set(_significant_words(mentor_ind))
        if common:
            return 40.0

    return 0.0


def _normalize_programme(value: Optional[str]) -> str:
    return re.sub(r"[^a-z0-9\s]", "", normalize(value))


def programme_score(mentee_programme: Optional[str], mentor_programme: Optional[str]) -> float:
    mentee_prog = _normalize_programme(mentee_programme)
    mentor_prog = _normalize_programme(mentor_programme)
    if not mentee_prog or not mentor_prog:
        return 0.0

    if mentee_prog == mentor_prog:
        return 100.0

    if mentee_prog in mentor_prog or mentor_prog in mentee_prog:
        return 80.0

    common = set(_significant_words(mentee_prog, r"\s+")) & set(_significant_words(mentor_prog, r"\s+"))
    if len(common) >= 2:
        return 60.0
    if len(common) == 1:
        return 30.0
    return 0.0
