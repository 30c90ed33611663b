"""
coaching/messages.py
Direct messages between teammates.
"""

import logging

from coaching.db import BaseStore
from coaching.errors import (
    EmptyMessageError,
    NotAuthenticatedError,
    PermissionDeniedError,
    raise_for_error,
)
from coaching.models import SessionUser, TeamMessage

logger = logging.getLogger(__name__)

MESSAGE_COLUMNS = "id, sender_id, receiver_id, message_text, created_at"


def _participant_filter(user_id: str) -> list[dict]:
    return [{"sender_id": user_id}, {"receiver_id": user_id}]


class TeamMessenger:
    def __init__(self, store: BaseStore):
        self._store = store

    def conversation(self, user: SessionUser, teammate_id: str) -> list[TeamMessage]:
        """Messages exchanged between user and teammate_id, oldest first."""
        if user is None or not teammate_id:
            return []

        response = raise_for_error(
            self._store.select(
                "team_messages",
                MESSAGE_COLUMNS,
                any_of=[
                    {"sender_id": user.id, "receiver_id": teammate_id},
                    {"sender_id": teammate_id, "receiver_id": user.id},
                ],
                order_by="created_at",
            ),
            "load messages",
        )
        return [TeamMessage.from_row(row) for row in response.data]

    def send(self, sender: SessionUser, receiver_id: str, text: str) -> TeamMessage:
        if sender is None:
            raise NotAuthenticatedError()
        text = (text or "").strip()
        if not receiver_id or not text:
            raise EmptyMessageError("Please select a teammate and type a message.")

        response = raise_for_error(
            self._store.insert(
                "team_messages",
                {"sender_id": sender.id, "receiver_id": receiver_id, "message_text": text},
            ),
            "send message",
        )
        return TeamMessage.from_row(response.first)

    def delete(self, user: SessionUser, message_id: str) -> bool:
        """
        Delete a message on behalf of either participant.

        Returns False if the message does not exist.  Raises
        PermissionDeniedError if user is neither its sender nor its receiver.
        """
        if user is None:
            raise NotAuthenticatedError()

        response = raise_for_error(
            self._store.select("team_messages", MESSAGE_COLUMNS, eq={"id": message_id}),
            "load message",
        )
        row = response.first
        if row is None:
            return False
        if not TeamMessage.from_row(row).involves(user.id):
            logger.warning("User %s tried to delete message %s", user.id, message_id)
            raise PermissionDeniedError("You can only delete messages you sent or received.")

        response = raise_for_error(
            self._store.delete(
                "team_messages",
                eq={"id": message_id},
                any_of=_participant_filter(user.id),
            ),
            "delete message",
        )
        return bool(response.data)
