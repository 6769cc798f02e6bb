from datetime import timedelta

import pytest

from vocab_scheduler.analytics.metrics import (
    build_item_snapshots_df,
    cefr_for_numeric_level,
    compute_known_words,
    compute_vocabulary_level,
    numeric_level_for_rank,
)
from vocab_scheduler.fsrs import R_TARGET, Item, ItemState


def known_item(word_id, now):
    return Item(user_id=1, word_id=word_id, stability=20.0, difficulty=5.0,
                state=ItemState.REVIEW, last_reviewed_at=now)


def forgotten_item(word_id, now):
    return Item(user_id=1, word_id=word_id, stability=1.0, difficulty=8.0,
                state=ItemState.REVIEW, last_reviewed_at=now - timedelta(days=30))


@pytest.mark.parametrize("rank, expected", [
    (0, 1.0),
    (500, 1.5),
    (1000, 2.0),
    (3000, 3.5),
    (15999, pytest.approx(5.9999, abs=1e-3)),
    (16000, 6.0),
    (50000, 6.0),
])
def test_numeric_level_for_rank(rank, expected):
    assert numeric_level_for_rank(rank) == expected


@pytest.mark.parametrize("numeric, cefr", [(1.0, "A1"), (1.99, "A1"), (2.32, "A2"), (4.5, "B2"), (6.0, "C2")])
def test_cefr_for_numeric_level(numeric, cefr):
    assert cefr_for_numeric_level(numeric) == cefr


def test_snapshots_recompute_retrievability(now):
    items = [known_item(1, now), forgotten_item(2, now), Item.new(user_id=1, word_id=3, now=now)]

    df = build_item_snapshots_df(items, {1: 100, 2: 200}, now)

    assert list(df["word_id"]) == [1, 2, 3]
    assert df.loc[0, "retrievability"] == 0.99
    assert df.loc[1, "retrievability"] < R_TARGET
    assert df.loc[2, "retrievability"] == 0.0
    assert df["frequency_rank"].isna().tolist() == [False, False, True]


def test_known_words_use_retrievability_threshold(now):
    df = build_item_snapshots_df([known_item(1, now), forgotten_item(2, now)], {}, now)

    known = compute_known_words(df, R_TARGET)

    assert known["word_id"].tolist() == [1]


def test_level_from_eightieth_percentile(now):
    ranks = {1: 100, 2: 200, 3: 300, 4: 400, 5: 5000}
    items = [known_item(word_id, now) for word_id in ranks]

    level = compute_vocabulary_level(build_item_snapshots_df(items, ranks, now), R_TARGET)

    assert level.numeric_level == 2.32
    assert level.cefr_level == "A2"
    assert level.known_words == 5
    assert level.tracked_words == 5


def test_forgotten_and_unranked_words_do_not_count(now):
    items = [known_item(1, now), forgotten_item(2, now), known_item(3, now)]

    level = compute_vocabulary_level(build_item_snapshots_df(items, {1: 500, 2: 20000}, now), R_TARGET)

    assert level.numeric_level == 1.5
    assert level.cefr_level == "A1"
    assert level.known_words == 2
    assert level.tracked_words == 3


def test_empty_user_is_a1(now):
    level = compute_vocabulary_level(build_item_snapshots_df([], {}, now), R_TARGET)

    assert level.cefr_level == "A1"
    assert level.numeric_level == 1.0
    assert level.known_words == 0
    assert level.tracked_words == 0


def test_no_known_words_is_a1(now):
    level = compute_vocabulary_level(build_item_snapshots_df([forgotten_item(1, now)], {1: 9000}, now), R_TARGET)

    assert level.cefr_level == "A1"
    assert level.numeric_level == 1.0
    assert level.tracked_words == 1
