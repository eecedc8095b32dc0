"""Tests unitaires de la suppression des arêtes entrantes (`ReferenceScanner`)."""

from __future__ import annotations

import pytest

from backend.domain.errors import TransientCleanupError
from backend.domain.references import ReferenceScanner
from tests.fakes import seed_profile


def test_likes_held_by_other_profiles_are_removed(store) -> None:
    """bob et carol aiment alice: les deux arêtes disparaissent."""
    seed_profile(store, "alice")
    seed_profile(store, "bob", likes=["alice", "dave"])
    seed_profile(store, "carol", likes=["alice"], followers=["alice"])

    ReferenceScanner(store).remove_inbound_edges("alice")

    assert not store.exists("profiles/bob/likes", "alice")
    assert not store.exists("profiles/carol/likes", "alice")
    assert not store.exists("profiles/carol/followers", "alice")
    # les autres arêtes restent intactes
    assert store.exists("profiles/bob/likes", "dave")


def test_target_own_subcollections_are_not_scanned(store) -> None:
    seed_profile(store, "alice", followers=["alice"])
    seed_profile(store, "bob")

    removed = ReferenceScanner(store).remove_inbound_edges("alice")

    # bob: followers + likes
    assert removed == 2
    assert store.exists("profiles/alice/followers", "alice")


def test_single_edge_failure_is_swallowed(store) -> None:
    seed_profile(store, "alice")
    seed_profile(store, "bob", likes=["alice"])
    seed_profile(store, "carol", likes=["alice"])
    store.fail("delete", "profiles/bob/likes", "alice")

    removed = ReferenceScanner(store).remove_inbound_edges("alice")

    assert removed == 3
    assert store.exists("profiles/bob/likes", "alice")
    assert not store.exists("profiles/carol/likes", "alice")


def test_listing_failure_is_transient(store) -> None:
    store.fail("list_ids", "profiles")
    with pytest.raises(TransientCleanupError):
        ReferenceScanner(store).remove_inbound_edges("alice")


def test_custom_profiles_collection(store) -> None:
    store.set("users", "bob", {})
    store.set("users/bob/followers", "alice", {})

    ReferenceScanner(store, profiles_collection="users").remove_inbound_edges("alice")

    assert not store.exists("users/bob/followers", "alice")
