"""
coaching/scoring.py
Communication scoring for Cadence.

Each message a user writes is analysed on four dimensions (tone, empathy,
clarity, confidence), stored in message_feedback, and the user's profile
carries the rounded mean of every message they have ever scored.

Entry points (on ScoreAggregator):
  record_scored_message(user_id, text) -> ScoredMessage
  recompute_profile_scores(user_id)    -> Scores
  submit_message(user_id, text)        -> ScoredMessage   (record + recompute)

The recompute reads the user's full history on every call.
"""

import logging
import math
import random

import pandas as pd

from coaching.db import BaseStore
from coaching.errors import EmptyMessageError, RemoteError, ScoresNotUpdatedError, raise_for_error
from coaching.models import SCORE_COLUMNS, SCORE_DIMENSIONS, ScoredMessage, Scores

logger = logging.getLogger(__name__)

SCORE_MIN = 0
SCORE_MAX = 100

FEEDBACK_COLUMNS = "id, user_id, message_text, " + ", ".join(SCORE_COLUMNS) + ", created_at"


# ─── Analysis ────────────────────────────────────────────────────────────────

def analyze_message(text: str) -> Scores:
    """
    Score a message on the four communication dimensions.

    Placeholder for a real model: each dimension is an independent uniform
    draw in [SCORE_MIN, SCORE_MAX].  The text is not inspected.
    """
    return Scores(
        tone=random.randint(SCORE_MIN, SCORE_MAX),
        empathy=random.randint(SCORE_MIN, SCORE_MAX),
        clarity=random.randint(SCORE_MIN, SCORE_MAX),
        confidence=random.randint(SCORE_MIN, SCORE_MAX),
    )


def _clamp(value) -> int:
    return int(max(SCORE_MIN, min(SCORE_MAX, int(value))))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero for positive values."""
    return int(math.floor(value + 0.5))


def mean_scores(messages: list[ScoredMessage]) -> Scores:
    """
    Per-dimension arithmetic mean of messages, rounded half-up.

    An empty history yields all zeros.
    """
    if not messages:
        return Scores()

    frame = history_frame(messages)
    means = frame[list(SCORE_DIMENSIONS)].mean()
    return Scores(**{name: round_half_up(means[name]) for name in SCORE_DIMENSIONS})


def history_frame(messages: list[ScoredMessage]) -> pd.DataFrame:
    """
    One row per scored message: created_at, message_text and the four scores.

    Returns an empty DataFrame (never None) when there are no messages.
    """
    if not messages:
        return pd.DataFrame(columns=["created_at", "message_text", *SCORE_DIMENSIONS])
    return pd.DataFrame(
        [
            {
                "created_at": m.created_at,
                "message_text": m.message_text,
                "tone": m.scores.tone,
                "empathy": m.scores.empathy,
                "clarity": m.scores.clarity,
                "confidence": m.scores.confidence,
            }
            for m in messages
        ]
    )


# ─── Aggregator ──────────────────────────────────────────────────────────────

class ScoreAggregator:
    """
    Records scored messages and keeps profile scores in step with them.

    analyzer is any callable text -> Scores; defaults to analyze_message.
    """

    def __init__(self, store: BaseStore, analyzer=analyze_message):
        self._store = store
        self._analyzer = analyzer

    def record_scored_message(self, user_id: str, text: str) -> ScoredMessage:
        """Analyse text and store it as a new scored message for user_id."""
        text = (text or "").strip()
        if not text:
            raise EmptyMessageError()

        scores = self._analyzer(text)
        scores = Scores(
            tone=_clamp(scores.tone),
            empathy=_clamp(scores.empathy),
            clarity=_clamp(scores.clarity),
            confidence=_clamp(scores.confidence),
        )
        response = raise_for_error(
            self._store.insert(
                "message_feedback",
                {"user_id": user_id, "message_text": text, **scores.to_columns()},
            ),
            "save message",
        )
        return ScoredMessage.from_row(response.first)

    def score_history(self, user_id: str) -> list[ScoredMessage]:
        """All of the user's scored messages, newest first."""
        response = raise_for_error(
            self._store.select(
                "message_feedback",
                FEEDBACK_COLUMNS,
                eq={"user_id": user_id},
                order_by="created_at",
                ascending=False,
            ),
            "load feedback history",
        )
        return [ScoredMessage.from_row(row) for row in response.data]

    def recompute_profile_scores(self, user_id: str) -> Scores:
        """
        Recalculate the profile's four scores from the full message history.

        Each score is the mean over every scored message, rounded half-up.
        With no history all four are reset to 0 rather than left stale.
        Returns the scores written.
        """
        scores = mean_scores(self.score_history(user_id))
        raise_for_error(
            self._store.update("profiles", scores.to_columns(), eq={"id": user_id}),
            "update profile scores",
        )
        logger.debug("Profile %s scores recomputed: %s", user_id, scores)
        return scores

    def submit_message(self, user_id: str, text: str) -> ScoredMessage:
        """
        Record a scored message, then refresh the profile averages.

        If the refresh fails the message stays stored and ScoresNotUpdatedError
        carries it as .saved.
        """
        message = self.record_scored_message(user_id, text)
        try:
            self.recompute_profile_scores(user_id)
        except RemoteError as exc:
            logger.warning("Message %s saved but scores not updated: %s", message.id, exc)
            raise ScoresNotUpdatedError(message, exc.error) from exc
        return message
