import pytest

from vocab_scheduler.fsrs import FSRSParams
from vocab_scheduler.fsrs.constants import DEFAULT_WEIGHTS


def test_defaults():
    params = FSRSParams()

    assert len(params.weights) == 19
    assert params.desired_retention == 0.9
    assert params.learning_steps == (1.0, 10.0)
    assert params.relearning_steps == (10.0,)
    assert params.maximum_interval == 36500
    assert params.enable_fuzzing is True


def test_lists_are_normalized_to_tuples():
    params = FSRSParams(weights=list(DEFAULT_WEIGHTS), learning_steps=[1, 5, 15])

    assert isinstance(params.weights, tuple)
    assert params.learning_steps == (1.0, 5.0, 15.0)
    hash(params)


def test_seventeen_weights_are_enough():
    assert len(FSRSParams(weights=DEFAULT_WEIGHTS[:17]).weights) == 17


def test_empty_step_lists_are_allowed():
    params = FSRSParams(learning_steps=(), relearning_steps=())
    assert params.learning_steps == ()
    assert params.relearning_steps == ()


@pytest.mark.parametrize("overrides", [
    {"weights": DEFAULT_WEIGHTS[:16]},
    {"weights": ["a"] * 19},
    {"desired_retention": 0.0},
    {"desired_retention": 1.0},
    {"desired_retention": 1.5},
    {"learning_steps": (1.0, 0.0)},
    {"relearning_steps": (-5.0,)},
    {"maximum_interval": 0},
    {"maximum_interval": 10.5},
    {"maximum_interval": True},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValueError):
        FSRSParams(**overrides)


def test_with_overrides_returns_validated_copy():
    params = FSRSParams()

    changed = params.with_overrides(desired_retention=0.85)

    assert changed.desired_retention == 0.85
    assert params.desired_retention == 0.9
    with pytest.raises(ValueError):
        params.with_overrides(maximum_interval=-1)


def test_with_overrides_rejects_unknown_fields():
    with pytest.raises(TypeError):
        FSRSParams().with_overrides(bogus=1)
