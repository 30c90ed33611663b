"""ScoreAggregator and the analysis placeholder."""

import random

import pytest

from coaching.db import StoreError
from coaching.errors import EmptyMessageError, RemoteError, ScoresNotUpdatedError
from coaching.models import SCORE_DIMENSIONS, ScoredMessage, Scores
from coaching.scoring import (
    ScoreAggregator,
    analyze_message,
    history_frame,
    mean_scores,
    round_half_up,
)


def fixed(**scores):
    """Analyzer that always returns the given scores."""
    return lambda text: Scores(**scores)


def seed_feedback(store, user, tone, empathy=50, clarity=50, confidence=50):
    store.seed(
        "message_feedback",
        user_id=user.id,
        message_text="hello team",
        tone_score=tone,
        empathy_score=empathy,
        clarity_score=clarity,
        confidence_score=confidence,
    )


def profile_row(store, user):
    return next(r for r in store.tables["profiles"] if r["id"] == user.id)


class TestAnalyzeMessage:

    def test_scores_within_range(self):
        random.seed(7)
        for _ in range(200):
            scores = analyze_message("Great job everyone on the launch!")
            for name in SCORE_DIMENSIONS:
                assert 0 <= getattr(scores, name) <= 100


class TestRoundHalfUp:

    @pytest.mark.parametrize(
        "value, expected",
        [(70.0, 70), (70.5, 71), (70.49, 70), (0.5, 1), (2.5, 3), (99.5, 100)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestRecordScoredMessage:

    def test_stores_message_with_scores(self, store, alice):
        aggregator = ScoreAggregator(store, analyzer=fixed(tone=80, empathy=60, clarity=70, confidence=90))

        message = aggregator.record_scored_message(alice.id, "  Let's aim to finish by Friday.  ")

        assert isinstance(message, ScoredMessage)
        assert message.message_text == "Let's aim to finish by Friday."
        assert message.scores == Scores(80, 60, 70, 90)
        row = store.tables["message_feedback"][0]
        assert row["user_id"] == alice.id
        assert row["tone_score"] == 80

    def test_empty_message_rejected(self, store, alice):
        with pytest.raises(EmptyMessageError):
            ScoreAggregator(store).record_scored_message(alice.id, "   ")
        assert store.calls == []

    def test_out_of_range_scores_are_clamped(self, store, alice):
        aggregator = ScoreAggregator(store, analyzer=fixed(tone=140, empathy=-5, clarity=100, confidence=0))

        message = aggregator.record_scored_message(alice.id, "hello")

        assert message.scores == Scores(100, 0, 100, 0)

    def test_store_failure(self, store, alice):
        store.fail[("insert", "message_feedback")] = StoreError("insert rejected")

        with pytest.raises(RemoteError):
            ScoreAggregator(store).record_scored_message(alice.id, "hello")


class TestRecomputeProfileScores:

    def test_no_messages_resets_to_zero(self, store, alice):
        profile_row(store, alice).update(tone_score=55, empathy_score=40)

        scores = ScoreAggregator(store).recompute_profile_scores(alice.id)

        assert scores == Scores(0, 0, 0, 0)
        row = profile_row(store, alice)
        assert [row[f"{d}_score"] for d in SCORE_DIMENSIONS] == [0, 0, 0, 0]

    def test_mean_of_tone_scores(self, store, alice):
        seed_feedback(store, alice, tone=80)
        seed_feedback(store, alice, tone=60)

        scores = ScoreAggregator(store).recompute_profile_scores(alice.id)

        assert scores.tone == 70
        assert profile_row(store, alice)["tone_score"] == 70

    def test_half_rounds_up(self, store, alice):
        seed_feedback(store, alice, tone=70, empathy=1)
        seed_feedback(store, alice, tone=71, empathy=2)

        scores = ScoreAggregator(store).recompute_profile_scores(alice.id)

        assert scores.tone == 71
        assert scores.empathy == 2

    def test_only_own_messages_count(self, store, alice, bob):
        seed_feedback(store, alice, tone=90)
        seed_feedback(store, bob, tone=10)

        ScoreAggregator(store).recompute_profile_scores(alice.id)

        assert profile_row(store, alice)["tone_score"] == 90
        assert profile_row(store, bob)["tone_score"] == 0

    def test_update_failure_raises(self, store, alice):
        store.fail[("update", "profiles")] = StoreError("update rejected")

        with pytest.raises(RemoteError):
            ScoreAggregator(store).recompute_profile_scores(alice.id)


class TestSubmitMessage:

    def test_submit_refreshes_profile(self, store, alice):
        seed_feedback(store, alice, tone=40, empathy=40, clarity=40, confidence=40)
        aggregator = ScoreAggregator(store, analyzer=fixed(tone=80, empathy=60, clarity=41, confidence=100))

        aggregator.submit_message(alice.id, "Thanks for the update, how can I help?")

        row = profile_row(store, alice)
        assert row["tone_score"] == 60
        assert row["empathy_score"] == 50
        assert row["clarity_score"] == 41
        assert row["confidence_score"] == 70

    def test_history_is_newest_first(self, store, alice):
        aggregator = ScoreAggregator(store, analyzer=fixed(tone=1, empathy=1, clarity=1, confidence=1))
        aggregator.submit_message(alice.id, "first")
        aggregator.submit_message(alice.id, "second")

        history = aggregator.score_history(alice.id)

        assert [m.message_text for m in history] == ["second", "first"]

    def test_score_refresh_failure_keeps_message(self, store, alice):
        store.fail[("update", "profiles")] = StoreError("update rejected")
        aggregator = ScoreAggregator(store, analyzer=fixed(tone=80, empathy=60, clarity=41, confidence=100))

        with pytest.raises(ScoresNotUpdatedError) as excinfo:
            aggregator.submit_message(alice.id, "Thanks for the update")

        assert excinfo.value.saved.message_text == "Thanks for the update"
        assert excinfo.value.error.message == "update rejected"
        assert [r["message_text"] for r in store.tables["message_feedback"]] == ["Thanks for the update"]
        assert profile_row(store, alice)["tone_score"] == 0

    def test_insert_failure_is_not_a_score_failure(self, store, alice):
        store.fail[("insert", "message_feedback")] = StoreError("insert rejected")
        aggregator = ScoreAggregator(store, analyzer=fixed(tone=1, empathy=1, clarity=1, confidence=1))

        with pytest.raises(RemoteError) as excinfo:
            aggregator.submit_message(alice.id, "hello")

        assert not isinstance(excinfo.value, ScoresNotUpdatedError)
        assert ("update", "profiles") not in store.calls


class TestHelpers:

    def test_mean_scores_empty(self):
        assert mean_scores([]) == Scores()

    def test_history_frame_empty_has_columns(self):
        frame = history_frame([])

        assert frame.empty
        assert list(frame.columns) == ["created_at", "message_text", *SCORE_DIMENSIONS]

    def test_history_frame_rows(self):
        messages = [
            ScoredMessage(id="m1", user_id="u", message_text="a", scores=Scores(10, 20, 30, 40)),
            ScoredMessage(id="m2", user_id="u", message_text="b", scores=Scores(50, 60, 70, 80)),
        ]

        frame = history_frame(messages)

        assert frame["tone"].tolist() == [10, 50]
        assert frame["confidence"].mean() == 60
