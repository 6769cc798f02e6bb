import random
from datetime import timedelta

import pytest

from vocab_scheduler import config
from vocab_scheduler.fsrs import (
    FSRSParams,
    InvalidGradeError,
    Item,
    ItemState,
    Rating,
    next_interval,
    process_review,
    retrievability,
    review,
)
from vocab_scheduler.fsrs.constants import DEFAULT_WEIGHTS as W
from vocab_scheduler.fsrs import scheduler as scheduler_module
from vocab_scheduler.fsrs.memory_updates import initial_difficulty
from vocab_scheduler.fsrs.scheduling import fuzz_range


@pytest.fixture
def new_item(now):
    return Item.new(user_id=1, word_id=2, now=now)


@pytest.fixture
def review_item(now):
    return Item(
        user_id=1,
        word_id=2,
        stability=10.0,
        difficulty=5.0,
        interval=10,
        state=ItemState.REVIEW,
        last_reviewed_at=now - timedelta(days=10),
        due=now,
    )


# ---- New items ----

def test_new_item_failure_lands_in_learning_step_zero(new_item, now, params):
    item = review(new_item, Rating.AGAIN, now, params)

    assert item.state is ItemState.LEARNING
    assert item.step == 0
    assert item.interval == 0
    assert item.due == now + timedelta(minutes=1)
    assert item.stability == W[0]
    assert item.difficulty == pytest.approx(initial_difficulty(Rating.AGAIN, W))
    assert item.last_reviewed_at == now
    assert item.last_quality == 1


def test_review_returns_new_value(new_item, now, params):
    item = review(new_item, Rating.GOOD, now, params)

    assert item is not new_item
    assert new_item.stability is None
    assert new_item.state is ItemState.UNSPECIFIED


def test_learning_steps_then_graduation(new_item, now, params):
    item = review(new_item, Rating.GOOD, now, params)
    assert item.state is ItemState.LEARNING
    assert item.step == 1
    assert item.due == now + timedelta(minutes=10)

    later = item.due
    item = review(item, Rating.GOOD, later, params)

    assert item.state is ItemState.REVIEW
    assert item.step is None
    assert item.interval == next_interval(item.stability, params)
    assert item.interval >= 1
    assert item.due == later + timedelta(days=item.interval)


def test_new_item_easy_graduates_immediately(new_item, now, params):
    item = review(new_item, Rating.EASY, now, params)

    assert item.state is ItemState.REVIEW
    assert item.stability == W[3]
    assert item.interval == round(W[3])
    assert item.due == now + timedelta(days=round(W[3]))


def test_repeated_failures_never_leave_stepping_states(new_item, now, params):
    item = new_item
    moment = now
    for _ in range(6):
        item = review(item, Rating.AGAIN, moment, params)
        assert item.state is ItemState.LEARNING
        assert item.step == 0
        assert item.stability > 0
        moment = item.due


def test_unspecified_state_with_memory_is_treated_as_new(now, params):
    item = Item(user_id=1, word_id=2, stability=4.0, difficulty=6.0, last_reviewed_at=now - timedelta(days=2))

    updated = review(item, Rating.AGAIN, now, params)

    assert updated.state is ItemState.LEARNING
    assert updated.step == 0


# ---- Review / relearning ----

def test_review_failure_enters_relearning(review_item, now, params):
    item = review(review_item, Rating.AGAIN, now, params)

    assert item.state is ItemState.RELEARNING
    assert item.step == 0
    assert item.interval == 0
    assert item.due == now + timedelta(minutes=10)
    assert 0 < item.stability < review_item.stability
    assert item.difficulty > review_item.difficulty


def test_relearning_failures_stay_in_relearning(review_item, now, params):
    item = review(review_item, Rating.AGAIN, now, params)
    for _ in range(4):
        item = review(item, Rating.AGAIN, item.due, params)
        assert item.state is ItemState.RELEARNING
        assert item.step == 0
        assert item.stability > 0


def test_relearning_pass_returns_to_review(review_item, now, params):
    item = review(review_item, Rating.AGAIN, now, params)
    item = review(item, Rating.GOOD, item.due, params)

    assert item.state is ItemState.REVIEW
    assert item.interval >= 1


@pytest.mark.parametrize("rating", [Rating.HARD, Rating.GOOD, Rating.EASY])
def test_review_pass_grows_stability_and_reschedules(review_item, now, params, rating):
    item = review(review_item, rating, now, params)

    assert item.state is ItemState.REVIEW
    assert item.stability > review_item.stability
    assert item.interval == next_interval(item.stability, params)
    assert item.due == now + timedelta(days=item.interval)


def test_review_caches_derived_fields_as_of_review_time(review_item, now, params):
    item = review(review_item, Rating.GOOD, now, params)

    assert item.elapsed_days == 0
    assert item.retrievability == 0.99


def test_fuzzed_interval_stays_near_unfuzzed(review_item, now):
    fuzzed_params = FSRSParams(enable_fuzzing=True)
    plain_params = FSRSParams(enable_fuzzing=False)
    expected = review(review_item, Rating.GOOD, now, plain_params).interval
    low, high = fuzz_range(expected, fuzzed_params)

    rng = random.Random(99)
    for _ in range(20):
        item = review(review_item, Rating.GOOD, now, fuzzed_params, rng)
        assert low <= item.interval <= high


def test_intervals_respect_maximum(review_item, now):
    params = FSRSParams(maximum_interval=3, enable_fuzzing=True)

    item = review(review_item, Rating.EASY, now, params, random.Random(3))

    assert 1 <= item.interval <= 3


# ---- Grades ----

@pytest.mark.parametrize("grade", [0, 5, -1, 2.5, True, None, "meh", ""])
def test_invalid_grades_are_rejected(new_item, now, params, grade):
    with pytest.raises(InvalidGradeError):
        review(new_item, grade, now, params)


@pytest.mark.parametrize("grade, expected", [(3, 3), ("good", 3), ("AGAIN", 1), (Rating.EASY, 4)])
def test_grade_forms_are_accepted(new_item, now, params, grade, expected):
    assert review(new_item, grade, now, params).last_quality == expected


# ---- process_review ----

def test_process_review_event_for_new_item(new_item, now, params):
    item, event = process_review(new_item, Rating.GOOD, now=now, params=params)

    assert event["user_id"] == 1
    assert event["word_id"] == 2
    assert event["timestamp"] == now
    assert event["grade"] == 3
    assert event["state_before"] is None
    assert event["state_after"] == "learning"
    assert event["stability_before"] is None
    assert event["retrievability_before"] is None
    assert event["stability_after"] == item.stability
    assert event["due"] == item.due


def test_process_review_event_for_review_item(review_item, now, params):
    _, expected_r = retrievability(review_item, now)

    item, event = process_review(review_item, Rating.HARD, now=now, params=params)

    assert event["state_before"] == "review"
    assert event["stability_before"] == 10.0
    assert event["difficulty_before"] == 5.0
    assert event["retrievability_before"] == pytest.approx(expected_r)
    assert event["interval"] == item.interval


def test_process_review_rejects_invalid_grade(new_item, now, params):
    with pytest.raises(InvalidGradeError):
        process_review(new_item, 9, now=now, params=params)


def test_process_review_uses_configured_params(new_item, now, monkeypatch):
    monkeypatch.setenv("FSRS_LEARNING_STEPS", "5")
    monkeypatch.setenv("FSRS_ENABLE_FUZZING", "false")
    config.get_fsrs_params.cache_clear()
    try:
        item, _ = process_review(new_item, Rating.AGAIN, now=now)
    finally:
        config.get_fsrs_params.cache_clear()

    assert item.due == now + timedelta(minutes=5)


def test_process_review_validates_and_measures_once(review_item, now, params, monkeypatch):
    calls = {"parse_rating": 0, "retrievability": 0}
    real_parse = scheduler_module.parse_rating
    real_retrievability = scheduler_module.memory_state.retrievability

    def counting_parse(grade):
        calls["parse_rating"] += 1
        return real_parse(grade)

    def counting_retrievability(item, when):
        calls["retrievability"] += 1
        return real_retrievability(item, when)

    monkeypatch.setattr(scheduler_module, "parse_rating", counting_parse)
    monkeypatch.setattr(scheduler_module.memory_state, "retrievability", counting_retrievability)

    _, event = process_review(review_item, "good", now=now, params=params)

    assert calls == {"parse_rating": 1, "retrievability": 1}
    assert event["retrievability_before"] == pytest.approx(0.9)
