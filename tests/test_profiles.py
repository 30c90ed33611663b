"""Profile lookups and self-edit."""

from coaching.models import Profile
from coaching.profiles import (
    avatar_initials,
    avatar_url,
    find_profile_by_email,
    get_profile,
    update_profile,
)


def test_get_profile(store, alice):
    profile = get_profile(store, alice.id)

    assert profile.email == alice.email
    assert profile.display_name == "Alice Johnson"


def test_missing_profiles_are_none(store):
    assert get_profile(store, "nobody") is None
    assert find_profile_by_email(store, "nobody@example.com") is None


def test_email_lookup_is_exact(store, bob):
    assert find_profile_by_email(store, bob.email).id == bob.id
    assert find_profile_by_email(store, "BOB@example.com") is None


def test_update_profile_writes_editable_fields_only(store, alice):
    updated = update_profile(store, alice.id, " Ally ", "Johnson", "https://img.example.com/a.png")

    assert updated.first_name == "Ally"
    assert updated.avatar_url == "https://img.example.com/a.png"
    (operation, table), = store.writes
    assert (operation, table) == ("update", "profiles")
    assert updated.scores.tone == 0


def test_update_unknown_profile(store):
    assert update_profile(store, "nobody", "A", "B", "") is None


def test_avatar_initials():
    assert avatar_initials(Profile(id="1", email="a@x.io", first_name="dana", last_name="prince")) == "DP"
    assert avatar_initials(Profile(id="1", email="eve@x.io")) == "E"
    assert avatar_initials(Profile(id="1", email="")) == "?"


def test_avatar_url_fallback():
    own = Profile(id="1", email="a@x.io", avatar_url="https://img.example.com/me.png")
    generated = Profile(id="2", email="bob@example.com")

    assert avatar_url(own) == "https://img.example.com/me.png"
    assert avatar_url(generated) == "https://api.dicebear.com/7.x/initials/svg?seed=bob%40example.com"


def test_display_name_falls_back_to_email():
    assert Profile(id="1", email="x@example.com").display_name == "x@example.com"
