"""
Pattern-matching hiring agent.

Scores a candidate as a weighted base score plus the points of every named
profile pattern it matches ("senior technologist", "weak technical
foundation", ...). A job description shifts the base weights toward the
dimensions it stresses.

Each pattern keeps success statistics from realized outcomes; its effective
points are its base points scaled by a smoothed success rate, so patterns
that keep producing good hires gain weight and misleading ones fade.
"""
import logging
from dataclasses import dataclass
from typing import Callable

from screening.services.agents.base import DecisionStrategy
from screening.services.agents.q_learning import compute_reward
from screening.services.config import AgentConfig
from screening.services.decisions import CONSIDER, HIRE, REJECT, Decision, TrainingExample
from screening.services.discretizer import discretize
from screening.services.features import COMPOSITE_WEIGHTS, FeatureVector, experience_percent
from screening.services.job_description import detect_emphasis

logger = logging.getLogger(__name__)

# Multiplier applied to the base weight of a dimension the job description stresses
EMPHASIS_BOOST = 1.5

# Beta prior on a pattern's success rate: PRIOR_STRENGTH pseudo-trials at PRIOR_RATE
PRIOR_STRENGTH = 4.0
PRIOR_RATE = 0.5

# A hire counts as successful from this rating up
SUCCESS_RATING = 3.0

# composite weight key -> FeatureVector-based 0-100 dimension score
_DIMENSIONS: dict[str, Callable[[FeatureVector], float]] = {
    "technical": lambda v: v.technical,
    "experience": lambda v: experience_percent(v.experience_years),
    "communication": lambda v: v.communication,
    "culture_fit": lambda v: v.culture_fit,
    "education": lambda v: v.education_level * 10.0,
    "leadership": lambda v: v.leadership,
}

# job-description emphasis uses FeatureVector attribute names
_EMPHASIS_KEYS = {
    "technical": "technical",
    "experience_years": "experience",
    "education_level": "education",
    "communication": "communication",
    "leadership": "leadership",
    "culture_fit": "culture_fit",
}


@dataclass(frozen=True)
class Pattern:
    name: str
    description: str
    points: float
    matches: Callable[[FeatureVector], bool]


PATTERNS: tuple[Pattern, ...] = (
    Pattern("senior_technologist", "Senior technologist", 6.0,
            lambda v: v.technical >= 80 and v.experience_years >= 5),
    Pattern("communicator_leader", "Communicator and leader", 5.0,
            lambda v: v.communication >= 75 and v.leadership >= 65),
    Pattern("well_rounded", "Well-rounded profile", 4.0,
            lambda v: min(v.technical, v.communication, v.leadership, v.culture_fit) >= 60),
    Pattern("culture_champion", "Culture champion", 3.0,
            lambda v: v.culture_fit >= 80),
    Pattern("academic_technologist", "Strong academic and technical base", 2.0,
            lambda v: v.education_level >= 7 and v.technical >= 65),
    Pattern("weak_technical_foundation", "Weak technical foundation", -8.0,
            lambda v: v.technical < 40),
    Pattern("communication_gap", "Communication gap", -5.0,
            lambda v: v.communication < 40),
    Pattern("no_track_record", "No track record", -4.0,
            lambda v: v.experience_years < 1 and v.technical < 60),
)


@dataclass
class PatternStats:
    trials: int = 0
    successes: int = 0

    @property
    def success_rate(self) -> float:
        return (self.successes + PRIOR_STRENGTH * PRIOR_RATE) / (self.trials + PRIOR_STRENGTH)


class PatternStrategy(DecisionStrategy):
    agent_type = "custom"

    def __init__(self, config: AgentConfig | None = None):
        super().__init__(config)
        self.stats: dict[str, PatternStats] = {}
        self._reset_model()

    # ─── Scoring ─────────────────────────────────────────────────────────────

    def pattern_points(self, pattern: Pattern) -> float:
        """Base points scaled by 2×(smoothed success rate); unchanged at the prior."""
        rate = self.stats[pattern.name].success_rate
        if pattern.points < 0:
            # a negative pattern is vindicated when its candidates do badly
            rate = 1.0 - rate
        return pattern.points * 2.0 * rate

    def matched_patterns(self, vector: FeatureVector) -> list[Pattern]:
        return [p for p in PATTERNS if p.matches(vector)]

    def base_score(self, vector: FeatureVector, job_description: str | None = None) -> float:
        weights = dict(COMPOSITE_WEIGHTS)
        for attr in detect_emphasis(job_description):
            weights[_EMPHASIS_KEYS[attr]] *= EMPHASIS_BOOST
        total = sum(weights.values())
        return sum(_DIMENSIONS[key](vector) * weight for key, weight in weights.items()) / total

    def score(self, vector: FeatureVector, job_description: str | None = None) -> tuple[float, list[Pattern]]:
        matched = self.matched_patterns(vector)
        raw = self.base_score(vector, job_description) + sum(self.pattern_points(p) for p in matched)
        return max(0.0, min(100.0, raw)), matched

    def classify(self, score: float) -> str:
        if score >= self.config.hire_threshold:
            return HIRE
        if score >= self.config.consider_threshold:
            return CONSIDER
        return REJECT

    def _decide(self, vector: FeatureVector, job_description: str | None) -> Decision:
        score, matched = self.score(vector, job_description)
        action = self.classify(score)

        distance = min(abs(score - self.config.hire_threshold), abs(score - self.config.consider_threshold))
        confidence = 0.55 + 0.4 * min(distance, 25.0) / 25.0

        detail = f"Pattern score {score:.1f}/100"
        if matched:
            detail += "; matched: " + ", ".join(
                f"{p.description} ({self.pattern_points(p):+.1f})" for p in matched
            )
        return self._finalize(vector, action, confidence, score / 100.0, job_description, detail=detail)

    # ─── Learn ───────────────────────────────────────────────────────────────

    def _train(self, vector, action, outcome, rating) -> TrainingExample:
        score_before, matched = self.score(vector)
        success = outcome and (rating is None or rating >= SUCCESS_RATING)
        for pattern in matched:
            stats = self.stats[pattern.name]
            stats.trials += 1
            stats.successes += int(success)
        score_after, _ = self.score(vector)

        logger.info(
            "Pattern update: %d pattern(s) matched, success=%s, score %.2f -> %.2f",
            len(matched), success, score_before, score_after,
        )
        return TrainingExample(
            state=discretize(vector),
            action=action,
            outcome=outcome,
            performance_rating=rating,
            reward=compute_reward(action, outcome, rating),
            q_before=round(score_before / 100.0, 4),
            q_after=round(score_after / 100.0, 4),
        )

    # ─── Model state ─────────────────────────────────────────────────────────

    def _model_insights(self) -> dict:
        return {
            "hireThreshold": self.config.hire_threshold,
            "considerThreshold": self.config.consider_threshold,
            "patterns": [
                {
                    "pattern": p.name,
                    "description": p.description,
                    "weight": round(self.pattern_points(p), 3),
                    "trials": self.stats[p.name].trials,
                    "successRate": round(self.stats[p.name].success_rate, 4),
                }
                for p in PATTERNS
            ],
        }

    def _export_model(self) -> dict:
        return {"patterns": {name: [s.trials, s.successes] for name, s in self.stats.items()}}

    def _import_model(self, data) -> None:
        self._reset_model()
        patterns = data.get("patterns") if isinstance(data, dict) else None
        if not isinstance(patterns, dict):
            return
        for name, value in patterns.items():
            if name not in self.stats or not isinstance(value, (list, tuple)) or len(value) != 2:
                continue
            try:
                trials, successes = int(value[0]), int(value[1])
            except (TypeError, ValueError):
                continue
            if 0 <= successes <= trials:
                self.stats[name] = PatternStats(trials, successes)

    def _reset_model(self) -> None:
        self.stats = {p.name: PatternStats() for p in PATTERNS}
