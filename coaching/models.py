"""
coaching/models.py
Row types for Cadence.

Plain data carried between the store and the pages.  Each type is built
from a store row with from_row(); unknown columns are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Invitation status values.
PENDING = "pending"
ACCEPTED = "accepted"
DECLINED = "declined"

INVITE_DECISIONS = (ACCEPTED, DECLINED)

SCORE_DIMENSIONS = ("tone", "empathy", "clarity", "confidence")
SCORE_COLUMNS = tuple(f"{name}_score" for name in SCORE_DIMENSIONS)


@dataclass(frozen=True)
class SessionUser:
    """The signed-in identity as supplied by Supabase Auth."""
    id: str
    email: str


@dataclass(frozen=True)
class Scores:
    tone: int = 0
    empathy: int = 0
    clarity: int = 0
    confidence: int = 0

    def to_columns(self) -> dict[str, int]:
        """Return the scores keyed by their *_score column names."""
        return {
            "tone_score": self.tone,
            "empathy_score": self.empathy,
            "clarity_score": self.clarity,
            "confidence_score": self.confidence,
        }

    @classmethod
    def from_row(cls, row: dict) -> Scores:
        return cls(
            tone=int(row.get("tone_score") or 0),
            empathy=int(row.get("empathy_score") or 0),
            clarity=int(row.get("clarity_score") or 0),
            confidence=int(row.get("confidence_score") or 0),
        )


@dataclass
class Profile:
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    avatar_url: str = ""
    scores: Scores = field(default_factory=Scores)

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.email

    @classmethod
    def from_row(cls, row: dict) -> Profile:
        return cls(
            id=str(row["id"]),
            email=row.get("email") or "",
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            avatar_url=row.get("avatar_url") or "",
            scores=Scores.from_row(row),
        )


# ─── Invitation parties ──────────────────────────────────────────────────────
# An invitation names its receiver by email, because the receiver may not
# have registered yet.  The other side of an edge is therefore either a
# known profile id or an email still to be resolved against profiles.

@dataclass(frozen=True)
class ById:
    id: str


@dataclass(frozen=True)
class ByEmail:
    email: str


PartyRef = Union[ById, ByEmail]


@dataclass
class Invitation:
    id: str
    sender_id: str
    receiver_email: str
    status: str = PENDING
    created_at: str | None = None
    sender_profile: Profile | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in INVITE_DECISIONS

    def other_party(self, user: SessionUser) -> PartyRef | None:
        """
        Return a reference to the party on the far side of this edge from user.

        Returns None if user is on neither side.
        """
        if self.sender_id == user.id:
            return ByEmail(self.receiver_email)
        if self.receiver_email == user.email:
            return ById(self.sender_id)
        return None

    @classmethod
    def from_row(cls, row: dict) -> Invitation:
        return cls(
            id=str(row["id"]),
            sender_id=str(row["sender_id"]),
            receiver_email=row.get("receiver_email") or "",
            status=row.get("status") or PENDING,
            created_at=row.get("created_at"),
        )


@dataclass
class ScoredMessage:
    id: str
    user_id: str
    message_text: str
    scores: Scores
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> ScoredMessage:
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            message_text=row.get("message_text") or "",
            scores=Scores.from_row(row),
            created_at=row.get("created_at"),
        )


@dataclass
class TeamMessage:
    id: str
    sender_id: str
    receiver_id: str
    message_text: str
    created_at: str | None = None

    def involves(self, user_id: str) -> bool:
        return user_id in (self.sender_id, self.receiver_id)

    @classmethod
    def from_row(cls, row: dict) -> TeamMessage:
        return cls(
            id=str(row["id"]),
            sender_id=str(row["sender_id"]),
            receiver_id=str(row["receiver_id"]),
            message_text=row.get("message_text") or "",
            created_at=row.get("created_at"),
        )


@dataclass
class TeamState:
    teammates: list[Profile]
    sent_pending: list[Invitation]
    received_pending: list[Invitation]

    @classmethod
    def empty(cls) -> TeamState:
        return cls(teammates=[], sent_pending=[], received_pending=[])
