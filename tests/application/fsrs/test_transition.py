"""Tests for the FSRS state transition (first review, same-day, forgot, recalled)."""

import itertools
import math
from datetime import date

import pytest

from studytrack.application.fsrs import normalize_config
from studytrack.application.fsrs.transition import initial_difficulty, transition
from studytrack.domain.constants import FSRS5_DEFAULT_WEIGHTS, FSRS6_DEFAULT_WEIGHTS
from studytrack.domain.fsrs.models import FSRSState, Rating


def _mature(stability=10.0, difficulty=5.0):
    return FSRSState(difficulty=difficulty, stability=stability, last_review=date(2026, 1, 1))


class TestFirstReview:
    @pytest.mark.parametrize("rating", list(Rating))
    def test_stability_is_weight_lookup(self, rating, new_state, v5_config):
        result = transition(new_state, rating, v5_config, 0)
        assert result.stability == FSRS5_DEFAULT_WEIGHTS[rating - 1]

    @pytest.mark.parametrize("rating", list(Rating))
    def test_stability_lookup_v6(self, rating, new_state, v6_config):
        result = transition(new_state, rating, v6_config, 0)
        assert result.stability == FSRS6_DEFAULT_WEIGHTS[rating - 1]

    @pytest.mark.parametrize("rating", list(Rating))
    def test_initial_difficulty(self, rating, new_state, v5_config):
        w = FSRS5_DEFAULT_WEIGHTS
        expected = w[4] - math.exp(w[5] * (rating - 1)) + 1
        result = transition(new_state, rating, v5_config, 0)
        assert result.difficulty == pytest.approx(min(max(expected, 1), 10), abs=0.006)

    def test_no_retrievability(self, new_state, v5_config):
        assert transition(new_state, Rating.GOOD, v5_config, 0).retrievability is None

    def test_elapsed_days_do_not_matter(self, new_state, v5_config):
        assert transition(new_state, Rating.GOOD, v5_config, 0) == transition(
            new_state, Rating.GOOD, v5_config, 40
        )

    def test_custom_weights_are_used(self, new_state):
        weights = list(FSRS5_DEFAULT_WEIGHTS)
        weights[2] = 4.2
        config = normalize_config({"customWeights": weights})
        assert transition(new_state, Rating.GOOD, config, 0).stability == 4.2

    def test_stability_floor(self, new_state):
        weights = list(FSRS5_DEFAULT_WEIGHTS)
        weights[0] = 0.01
        config = normalize_config({"customWeights": weights})
        assert transition(new_state, Rating.AGAIN, config, 0).stability == 0.1

    def test_difficulty_clamped_to_ten(self, new_state):
        weights = list(FSRS5_DEFAULT_WEIGHTS)
        weights[4] = 50.0
        config = normalize_config({"customWeights": weights})
        assert transition(new_state, Rating.AGAIN, config, 0).difficulty == 10.0


class TestDifficultyUpdate:
    def test_again_raises_easy_lowers(self, v5_config):
        state = _mature(difficulty=5.0)
        again = transition(state, Rating.AGAIN, v5_config, 5).difficulty
        good = transition(state, Rating.GOOD, v5_config, 5).difficulty
        easy = transition(state, Rating.EASY, v5_config, 5).difficulty
        assert again > good > easy

    def test_good_reverts_towards_easy_initial_difficulty(self, v5_config):
        w = FSRS5_DEFAULT_WEIGHTS
        state = _mature(difficulty=7.0)
        expected = w[7] * initial_difficulty(Rating.EASY, w) + (1 - w[7]) * 7.0
        result = transition(state, Rating.GOOD, v5_config, 1)
        assert result.difficulty == pytest.approx(expected, abs=0.006)

    def test_applied_on_same_day_too(self, v5_config):
        state = _mature(difficulty=5.0)
        assert transition(state, Rating.AGAIN, v5_config, 0).difficulty > 5.0


class TestSameDay:
    @pytest.mark.parametrize(
        "config_name,rating,stability",
        list(
            itertools.product(
                ["v5_config", "v6_config"],
                [Rating.GOOD, Rating.EASY],
                [0.1, 0.4, 3.173, 8.2956, 40.0, 900.0],
            )
        ),
    )
    def test_good_and_easy_never_shrink(self, request, config_name, rating, stability):
        config = request.getfixturevalue(config_name)
        state = _mature(stability=stability)
        result = transition(state, rating, config, 0)
        assert result.stability >= stability

    def test_again_can_shrink(self, v5_config):
        state = _mature(stability=10.0)
        assert transition(state, Rating.AGAIN, v5_config, 0).stability < 10.0

    def test_v5_same_day_multiplier(self, v5_config):
        w = FSRS5_DEFAULT_WEIGHTS
        state = _mature(stability=10.0)
        expected = 10.0 * math.exp(w[17] * (Rating.GOOD - 3 + w[18]))
        result = transition(state, Rating.GOOD, v5_config, 0)
        assert result.stability == pytest.approx(expected, abs=0.006)

    def test_v6_damps_large_stability(self, v6_config):
        w = FSRS6_DEFAULT_WEIGHTS
        state = _mature(stability=4.0)
        boost = math.exp(w[17] * (Rating.HARD - 3 + w[18])) * 4.0 ** -w[19]
        result = transition(state, Rating.HARD, v6_config, 0)
        assert result.stability == pytest.approx(max(4.0 * boost, 0.1), abs=0.006)

    def test_retrievability_reported(self, v5_config):
        result = transition(_mature(), Rating.GOOD, v5_config, 0)
        assert result.retrievability == pytest.approx(1.0)


class TestForgot:
    def test_post_lapse_stability_below_previous(self, v5_config):
        state = _mature(stability=30.0)
        result = transition(state, Rating.AGAIN, v5_config, 30)
        assert 0.1 <= result.stability < 30.0

    def test_formula(self, v5_config):
        w = FSRS5_DEFAULT_WEIGHTS
        state = _mature(stability=30.0, difficulty=5.0)
        result = transition(state, Rating.AGAIN, v5_config, 30)
        recall = result.retrievability
        expected = (
            w[11]
            * result.difficulty ** -w[12]
            * ((30.0 + 1) ** w[13] - 1)
            * math.exp(w[14] * (1 - recall))
        )
        assert recall == pytest.approx(0.9)
        assert result.stability == pytest.approx(expected, abs=0.02)


class TestRecalled:
    @pytest.mark.parametrize("config_name", ["v5_config", "v6_config"])
    def test_easy_beats_good_beats_hard(self, request, config_name):
        config = request.getfixturevalue(config_name)
        state = _mature(stability=10.0, difficulty=5.0)
        hard = transition(state, Rating.HARD, config, 10).stability
        good = transition(state, Rating.GOOD, config, 10).stability
        easy = transition(state, Rating.EASY, config, 10).stability
        assert easy > good > hard > 10.0

    def test_longer_wait_grows_stability_more(self, v5_config):
        state = _mature(stability=10.0)
        early = transition(state, Rating.GOOD, v5_config, 2).stability
        late = transition(state, Rating.GOOD, v5_config, 20).stability
        assert late > early

    def test_known_value(self, reviewed_state, v5_config):
        result = transition(reviewed_state, Rating.GOOD, v5_config, 1)
        assert result.difficulty == pytest.approx(6.98, abs=0.011)
        assert result.stability == pytest.approx(2.37, abs=0.011)
        assert result.retrievability == pytest.approx(0.794, abs=0.001)


class TestInvariants:
    @pytest.mark.parametrize(
        "config_name,rating,elapsed,stability,difficulty",
        list(
            itertools.product(
                ["v5_config", "v6_config"],
                list(Rating),
                [0, 1, 7, 400],
                [0, 0.1, 2.5, 60.0, 5000.0],
                [1.0, 5.0, 10.0],
            )
        ),
    )
    def test_ranges(self, request, config_name, rating, elapsed, stability, difficulty):
        config = request.getfixturevalue(config_name)
        state = FSRSState(difficulty=difficulty, stability=stability)
        result = transition(state, rating, config, elapsed)
        assert 1.0 <= result.difficulty <= 10.0
        assert result.stability >= 0.1
        assert math.isfinite(result.stability)


def _custom(version, **overrides):
    defaults = FSRS6_DEFAULT_WEIGHTS if version == "fsrs6" else FSRS5_DEFAULT_WEIGHTS
    weights = list(defaults)
    for index, value in overrides.items():
        weights[int(index[1:])] = value
    return normalize_config({"version": version, "customWeights": weights})


class TestExtremeCustomWeights:
    def test_recall_growth_overflow_saturates(self):
        config = _custom("fsrs5", w8=800.0)
        result = transition(_mature(stability=10.0), Rating.GOOD, config, 13)
        assert result.stability == 36500.0

    def test_same_day_boost_overflow_saturates(self):
        config = _custom("fsrs5", w17=10000.0)
        assert transition(_mature(), Rating.GOOD, config, 0).stability == 36500.0
        assert transition(_mature(), Rating.AGAIN, config, 0).stability == 0.1

    def test_undefined_same_day_update_keeps_stability(self):
        # exp overflows to inf while S^-w19 underflows to 0
        config = _custom("fsrs6", w17=10000.0, w19=1000.0)
        result = transition(_mature(stability=10.0), Rating.GOOD, config, 0)
        assert result.stability == 10.0

    def test_initial_difficulty_overflow_clamps(self, new_state):
        config = _custom("fsrs5", w5=1000.0)
        assert transition(new_state, Rating.GOOD, config, 0).difficulty == 1.0

    def test_undefined_mean_reversion_keeps_damped_difficulty(self):
        config = _custom("fsrs5", w5=1000.0, w7=0.0)
        result = transition(_mature(difficulty=5.0), Rating.GOOD, config, 5)
        assert result.difficulty == 5.0
