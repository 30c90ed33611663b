"""
coaching/profiles.py
Profile lookups and self-edit for Cadence.
"""

from urllib.parse import quote

from coaching.db import BaseStore
from coaching.errors import raise_for_error
from coaching.models import Profile

PROFILE_COLUMNS = (
    "id, email, first_name, last_name, avatar_url, "
    "tone_score, empathy_score, clarity_score, confidence_score"
)

# Fields a user may change on their own profile.  Scores are written only by
# the score aggregator.
EDITABLE_FIELDS = ("first_name", "last_name", "avatar_url")

_AVATAR_SERVICE = "https://api.dicebear.com/7.x/initials/svg?seed="


def get_profile(store: BaseStore, user_id: str) -> Profile | None:
    """Return the profile with this id, or None if there is no such row."""
    response = raise_for_error(
        store.select("profiles", PROFILE_COLUMNS, eq={"id": user_id}),
        "load profile",
    )
    row = response.first
    return Profile.from_row(row) if row else None


def find_profile_by_email(store: BaseStore, email: str) -> Profile | None:
    """
    Return the profile registered under email, or None.

    None is the normal answer for an invitee who has not signed up yet.
    Matching is exact; emails are compared as stored.
    """
    response = raise_for_error(
        store.select("profiles", PROFILE_COLUMNS, eq={"email": email}),
        "look up profile",
    )
    row = response.first
    return Profile.from_row(row) if row else None


def update_profile(
    store: BaseStore,
    user_id: str,
    first_name: str,
    last_name: str,
    avatar_url: str,
) -> Profile | None:
    """
    Save the editable fields of the user's own profile.

    Returns the updated profile, or None if no row matched user_id.
    """
    values = {
        "first_name": first_name.strip(),
        "last_name": last_name.strip(),
        "avatar_url": avatar_url.strip(),
    }
    response = raise_for_error(
        store.update("profiles", values, eq={"id": user_id}),
        "update profile",
    )
    row = response.first
    return Profile.from_row(row) if row else None


def avatar_initials(profile: Profile) -> str:
    """Initials of first and last name, else the first letter of the email."""
    initials = (profile.first_name[:1] + profile.last_name[:1]).upper()
    if initials:
        return initials
    return profile.email[:1].upper() or "?"


def avatar_url(profile: Profile) -> str:
    """The profile's own avatar, else a generated initials avatar."""
    if profile.avatar_url:
        return profile.avatar_url
    return _AVATAR_SERVICE + quote(profile.email)
