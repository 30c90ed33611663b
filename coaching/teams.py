"""
coaching/teams.py
Invitation lifecycle and teammate resolution for Cadence.

Invitations are directed edges from a sender id to a receiver email.  The
teammate relation derived from them is symmetric: an accepted edge in either
direction makes the two people teammates.

Entry points (on TeamResolver):
  resolve_team_state(user) -> TeamState
  send_invite(sender, receiver_email) -> Invitation
  respond_to_invite(invite_id, decision) -> Invitation | None

Duplicate checks in send_invite are not transactional with the insert.  Two
concurrent invites for the same pair can both be stored as pending; this is
tolerated because teammates are deduplicated by profile id at read time.
"""

import logging

from coaching.db import BaseStore
from coaching.errors import (
    AlreadyTeammateError,
    EmptyEmailError,
    InvitePendingError,
    NotAuthenticatedError,
    SelfInviteError,
    ValidationError,
    raise_for_error,
)
from coaching.models import (
    ACCEPTED,
    INVITE_DECISIONS,
    PENDING,
    ByEmail,
    ById,
    Invitation,
    PartyRef,
    Profile,
    SessionUser,
    TeamState,
)
from coaching.profiles import find_profile_by_email, get_profile

logger = logging.getLogger(__name__)

INVITE_COLUMNS = "id, sender_id, receiver_email, status, created_at"


class TeamResolver:
    """Derives a user's team from the team_invitations and profiles tables."""

    def __init__(self, store: BaseStore):
        self._store = store

    # ─── Reads ───────────────────────────────────────────────────────────────

    def _invitations(self, action: str, **filters) -> list[Invitation]:
        response = raise_for_error(
            self._store.select(
                "team_invitations",
                INVITE_COLUMNS,
                order_by="created_at",
                **filters,
            ),
            action,
        )
        return [Invitation.from_row(row) for row in response.data]

    def resolve_party(self, ref: PartyRef) -> Profile | None:
        """Turn a party reference into a profile; None if it is unregistered."""
        if isinstance(ref, ById):
            return get_profile(self._store, ref.id)
        if isinstance(ref, ByEmail):
            return find_profile_by_email(self._store, ref.email)
        raise TypeError(f"Unknown party reference: {ref!r}")

    def teammates(self, user: SessionUser) -> list[Profile]:
        """
        Return the profiles of everyone with an accepted edge to user.

        Each teammate appears once, in the order their first accepted edge
        was found.  Edges whose receiver has not registered are skipped.
        """
        accepted = self._invitations(
            "load teammates",
            eq={"status": ACCEPTED},
            any_of=[{"sender_id": user.id}, {"receiver_email": user.email}],
        )

        seen: set[str] = set()
        found: list[Profile] = []
        for invite in accepted:
            ref = invite.other_party(user)
            if ref is None:
                continue
            profile = self.resolve_party(ref)
            if profile is None or profile.id in seen:
                continue
            seen.add(profile.id)
            found.append(profile)
        return found

    def sent_pending(self, user: SessionUser) -> list[Invitation]:
        return self._invitations(
            "load sent invitations",
            eq={"sender_id": user.id, "status": PENDING},
        )

    def received_pending(self, user: SessionUser) -> list[Invitation]:
        """Pending invitations addressed to user, each with its sender's profile."""
        invites = self._invitations(
            "load received invitations",
            eq={"receiver_email": user.email, "status": PENDING},
        )
        senders: dict[str, Profile | None] = {}
        for invite in invites:
            if invite.sender_id not in senders:
                senders[invite.sender_id] = get_profile(self._store, invite.sender_id)
            invite.sender_profile = senders[invite.sender_id]
        return invites

    def resolve_team_state(self, user: SessionUser | None) -> TeamState:
        """
        Return teammates, pending sent and pending received invitations.

        With no signed-in user (or one missing an id or email) the result is
        empty and the store is not touched.
        """
        if user is None or not user.id or not user.email:
            return TeamState.empty()

        return TeamState(
            teammates=self.teammates(user),
            sent_pending=self.sent_pending(user),
            received_pending=self.received_pending(user),
        )

    # ─── Writes ──────────────────────────────────────────────────────────────

    def _existing_edges(self, sender: SessionUser, receiver_email: str) -> list[Invitation]:
        """Invitations between sender and receiver_email, in either direction."""
        groups = [{"sender_id": sender.id, "receiver_email": receiver_email}]
        receiver = find_profile_by_email(self._store, receiver_email)
        if receiver is not None:
            groups.append({"sender_id": receiver.id, "receiver_email": sender.email})
        return self._invitations("check existing invitations", any_of=groups)

    def send_invite(self, sender: SessionUser | None, receiver_email: str) -> Invitation:
        """
        Invite receiver_email to become sender's teammate.

        Raises:
          NotAuthenticatedError - no sender
          EmptyEmailError       - blank email
          SelfInviteError       - email equals the sender's own (exact match)
          AlreadyTeammateError  - an accepted edge exists either way
          InvitePendingError    - a pending edge exists either way
          RemoteError           - the store rejected a query or the insert

        Declined edges do not block a new invitation.
        """
        if sender is None:
            raise NotAuthenticatedError()

        email = (receiver_email or "").strip()
        if not email:
            raise EmptyEmailError()
        if email == sender.email:
            raise SelfInviteError()

        existing = self._existing_edges(sender, email)
        if any(invite.status == ACCEPTED for invite in existing):
            raise AlreadyTeammateError(email)
        if any(invite.status == PENDING for invite in existing):
            raise InvitePendingError(email)

        response = raise_for_error(
            self._store.insert(
                "team_invitations",
                {"sender_id": sender.id, "receiver_email": email, "status": PENDING},
            ),
            "send invitation",
        )
        invite = Invitation.from_row(response.first)
        logger.info("Invitation %s sent by %s", invite.id, sender.id)
        return invite

    def respond_to_invite(self, invite_id: str, decision: str) -> Invitation | None:
        """
        Accept or decline a pending invitation.

        The update only matches rows still in 'pending', so a response to an
        already accepted or declined invitation changes nothing and returns
        None.  Whether the caller is the addressee is left to the store's
        row-level policy.
        """
        if decision not in INVITE_DECISIONS:
            raise ValidationError(f"Invalid invitation decision: {decision!r}")

        response = raise_for_error(
            self._store.update(
                "team_invitations",
                {"status": decision},
                eq={"id": invite_id, "status": PENDING},
            ),
            "respond to invitation",
        )
        row = response.first
        if row is None:
            logger.info("Invitation %s is not pending; %s ignored", invite_id, decision)
            return None
        return Invitation.from_row(row)
