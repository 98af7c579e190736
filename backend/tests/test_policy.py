"""Tests for the shared override policy and reasoning text."""
import pytest

from screening.services.agents.base import _assess, apply_overrides, build_reasoning, is_correct
from screening.services.config import AgentConfig
from screening.services.decisions import CONSIDER, HIRE, REJECT
from screening.services.features import FeatureVector, composite_score

DEFAULTS = AgentConfig()


def _vector(**overrides):
    values = dict(technical=50, experience_years=3, education_level=5,
                  communication=50, leadership=50, culture_fit=50)
    values.update(overrides)
    return FeatureVector.of(**values)


class TestApplyOverrides:
    @pytest.mark.parametrize("action", [HIRE, CONSIDER, REJECT])
    def test_force_hire(self, strong_vector, action):
        final, override = apply_overrides(action, strong_vector, 88.45, DEFAULTS)
        assert final == HIRE
        assert override == (None if action == HIRE else "force_hire")

    def test_no_reject_high_score(self):
        vector = _vector()
        assert apply_overrides(REJECT, vector, 72.0, DEFAULTS) == (CONSIDER, "no_reject_high_score")

    def test_no_reject_leaves_other_actions_alone(self):
        vector = _vector()
        assert apply_overrides(HIRE, vector, 72.0, DEFAULTS) == (HIRE, None)
        assert apply_overrides(CONSIDER, vector, 72.0, DEFAULTS) == (CONSIDER, None)

    @pytest.mark.parametrize("field", ["technical", "communication"])
    def test_strong_signal_blocks_reject(self, field):
        vector = _vector(**{field: 76})
        assert apply_overrides(REJECT, vector, 40.0, DEFAULTS) == (CONSIDER, "no_reject_strong_signal")

    def test_strong_signal_threshold_is_exclusive(self):
        vector = _vector(technical=75, communication=75)
        assert apply_overrides(REJECT, vector, 40.0, DEFAULTS) == (REJECT, None)

    def test_low_scores_pass_through(self):
        vector = _vector(technical=20, communication=20)
        for action in (HIRE, CONSIDER, REJECT):
            assert apply_overrides(action, vector, 25.0, DEFAULTS) == (action, None)

    def test_thresholds_are_configurable(self, strong_vector):
        strict = AgentConfig(force_hire_threshold=90, no_reject_threshold=85)
        assert apply_overrides(REJECT, strong_vector, 88.45, strict) == (CONSIDER, "no_reject_high_score")
        lenient = AgentConfig(force_hire_threshold=60)
        assert apply_overrides(REJECT, _vector(), 61.0, lenient) == (HIRE, "force_hire")


class TestReasoning:
    def test_no_dimension_is_both_strength_and_concern(self):
        for t in range(0, 101, 10):
            for c in range(0, 101, 25):
                for years in (0, 1, 3, 6, 12):
                    for edu in (0, 3, 6, 10):
                        vector = _vector(technical=t, communication=c, experience_years=years,
                                         education_level=edu, leadership=100 - t, culture_fit=c)
                        strengths, concerns = _assess(vector)
                        attrs = [attr for attr, _ in strengths + concerns]
                        assert len(attrs) == len(set(attrs))

    def test_hire_reasoning_leads_with_strengths(self, strong_vector):
        lines = build_reasoning(strong_vector, HIRE, composite_score(strong_vector), None, DEFAULTS)
        assert lines[0].startswith("Strong candidate: Excellent technical skills")
        assert not any("Areas for consideration" in line for line in lines)

    def test_reject_reasoning_leads_with_a_concern(self, weak_vector):
        lines = build_reasoning(weak_vector, REJECT, composite_score(weak_vector), None, DEFAULTS)
        assert lines[0].startswith("Not recommended: Limited technical background")
        assert not any(line.startswith("Strengths") for line in lines)

    def test_override_is_explained(self, strong_vector):
        lines = build_reasoning(strong_vector, HIRE, 88.45, "force_hire", DEFAULTS)
        assert "Override: composite score 88 meets the 80 bar, so the decision is HIRE" in lines

    def test_job_description_emphasis(self, strong_vector):
        lines = build_reasoning(
            strong_vector, HIRE, 88.45, None, DEFAULTS,
            job_description="Senior backend engineer: Python, AWS, Kubernetes. Mentor the team.",
        )
        emphasis = [line for line in lines if line.startswith("Job description emphasis")]
        assert emphasis == ["Job description emphasis: technical skills (meets), experience (meets)"]

    def test_blank_job_description_adds_nothing(self, strong_vector):
        with_blank = build_reasoning(strong_vector, HIRE, 88.45, None, DEFAULTS, job_description="   ")
        without = build_reasoning(strong_vector, HIRE, 88.45, None, DEFAULTS)
        assert with_blank == without


class TestIsCorrect:
    def test_reject_is_correct_when_candidate_did_not_work_out(self):
        assert is_correct(REJECT, False)
        assert not is_correct(REJECT, True)

    def test_hire_and_consider_are_correct_when_candidate_worked_out(self):
        assert is_correct(HIRE, True)
        assert is_correct(CONSIDER, True)
        assert not is_correct(HIRE, False)
