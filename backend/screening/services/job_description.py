"""
Job description emphasis detection.

A free-text job description shifts which candidate dimensions matter most.
This is deliberately keyword-based: the agents only need to know which of
the six dimensions a posting stresses.
"""
import re

# dimension attr -> keyword patterns that signal the posting stresses it
_EMPHASIS_PATTERNS = {
    "technical": re.compile(
        r"\b(engineer(ing)?|developer|python|java(script)?|typescript|sql|cloud|aws|azure|gcp|"
        r"kubernetes|docker|machine learning|data|architecture|backend|frontend|devops)\b",
        re.I,
    ),
    "experience_years": re.compile(
        r"\b(senior|staff|principal|\d+\+?\s*years?|experienced|veteran|seasoned)\b", re.I
    ),
    "education_level": re.compile(
        r"\b(bachelor'?s?|master'?s?|ph\.?d|degree|mba|certified|certification)\b", re.I
    ),
    "communication": re.compile(
        r"\b(communication|stakeholders?|present(ation|ing)?|writing|client[- ]facing|collaborat\w*)\b", re.I
    ),
    "leadership": re.compile(
        r"\b(lead(er|ership|ing)?|manag(e|er|ement|ing)|mentor(ing|ship)?|head of|director|ownership)\b", re.I
    ),
    "culture_fit": re.compile(
        r"\b(culture|values|team player|startup|fast[- ]paced|mission|inclusive|adaptab\w*)\b", re.I
    ),
}

DIMENSION_LABELS = {
    "technical": "technical skills",
    "experience_years": "experience",
    "education_level": "education",
    "communication": "communication",
    "leadership": "leadership",
    "culture_fit": "culture fit",
}


def detect_emphasis(job_description: str | None) -> dict[str, int]:
    """Return {dimension attr: keyword hit count} for dimensions the posting mentions."""
    if not job_description or not job_description.strip():
        return {}
    hits = {}
    for attr, pattern in _EMPHASIS_PATTERNS.items():
        count = len(pattern.findall(job_description))
        if count:
            hits[attr] = count
    return hits


def top_emphasis(job_description: str | None, limit: int = 2) -> list[str]:
    hits = detect_emphasis(job_description)
    ranked = sorted(hits.items(), key=lambda item: (-item[1], item[0]))
    return [attr for attr, _ in ranked[:limit]]
