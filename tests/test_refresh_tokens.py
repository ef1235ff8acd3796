from datetime import timedelta

import pytest

from services.refresh_tokens import RefreshTokenManager
from tests.conftest import remove_user, tokens_for
from utils.exceptions import EntropyError, Expired, NotFound, UserNotFound
from utils.security import digest_token


@pytest.fixture
def manager(storage, store_clock):
    return RefreshTokenManager(storage, clock=store_clock)


@pytest.fixture
def user(storage):
    return storage.add_user("alice", "not-a-real-hash")


def test_generate_is_64_hex_chars_and_unique(manager):
    tokens = {manager.generate() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == 64
        int(token, 16)


def test_generate_without_entropy(monkeypatch, manager):
    import services.refresh_tokens as module

    def exhausted(nbytes):
        raise OSError("no entropy")

    monkeypatch.setattr(module.secrets, "token_hex", exhausted)
    with pytest.raises(EntropyError):
        manager.generate()


def test_store_keeps_only_digest_with_seven_day_expiry(manager, storage, user, store_clock):
    token = manager.generate()
    manager.store(user.id, token)

    [record] = tokens_for(storage, user.id)
    assert record.token_hash == digest_token(token)
    assert record.token_hash != token
    assert record.created_at == store_clock.now
    assert record.expires_at - record.created_at == timedelta(days=7)


def test_consume_returns_owner_and_deletes_record(manager, storage, user):
    token = manager.generate()
    manager.store(user.id, token)

    assert manager.validate_and_consume(token) == (user.id, "alice")
    assert tokens_for(storage, user.id) == []


def test_consume_twice_is_not_found(manager, user):
    token = manager.generate()
    manager.store(user.id, token)
    manager.validate_and_consume(token)

    with pytest.raises(NotFound):
        manager.validate_and_consume(token)


def test_unknown_token_is_not_found(manager):
    with pytest.raises(NotFound):
        manager.validate_and_consume("f" * 64)


def test_expired_token_is_deleted(manager, storage, user, store_clock):
    token = manager.generate()
    manager.store(user.id, token)

    store_clock.advance(timedelta(days=7, seconds=1))
    with pytest.raises(Expired):
        manager.validate_and_consume(token)
    assert tokens_for(storage, user.id) == []
    with pytest.raises(NotFound):
        manager.validate_and_consume(token)


def test_token_valid_up_to_its_expiry(manager, user, store_clock):
    token = manager.generate()
    manager.store(user.id, token)

    store_clock.advance(timedelta(days=7))
    assert manager.validate_and_consume(token) == (user.id, "alice")


def test_orphaned_token_is_user_not_found(manager, storage, user, monkeypatch):
    token = manager.generate()
    manager.store(user.id, token)

    monkeypatch.setattr(storage, "get_user", lambda user_id: None)
    with pytest.raises(UserNotFound):
        manager.validate_and_consume(token)


def test_lost_delete_race_is_not_found(manager, storage, user, monkeypatch):
    token = manager.generate()
    manager.store(user.id, token)
    record = storage.get_refresh_token(digest_token(token))

    # another request removes the row between lookup and delete
    original_get_user = storage.get_user

    def get_user_then_race(user_id):
        storage.delete_refresh_token(record.id)
        return original_get_user(user_id)

    monkeypatch.setattr(storage, "get_user", get_user_then_race)
    with pytest.raises(NotFound):
        manager.validate_and_consume(token)


def test_cascade_delete_removes_tokens(manager, storage, user):
    manager.store(user.id, manager.generate())
    manager.store(user.id, manager.generate())
    user_id = user.id

    remove_user(storage, user_id)
    assert tokens_for(storage, user_id) == []


def test_revoke(manager, storage, user):
    token = manager.generate()
    manager.store(user.id, token)

    assert manager.revoke(token) is True
    assert manager.revoke(token) is False
    with pytest.raises(NotFound):
        manager.validate_and_consume(token)


def test_purge_expired(manager, storage, user, store_clock):
    stale = manager.generate()
    manager.store(user.id, stale)
    store_clock.advance(timedelta(days=3))
    fresh = manager.generate()
    manager.store(user.id, fresh)

    store_clock.advance(timedelta(days=5))
    assert manager.purge_expired() == 1
    [record] = tokens_for(storage, user.id)
    assert record.token_hash == digest_token(fresh)


def test_rotate_replaces_record_in_one_step(manager, storage, user, store_clock):
    token = manager.generate()
    manager.store(user.id, token)
    store_clock.advance(timedelta(days=1))

    user_id, username, new_token = manager.rotate(token)

    assert (user_id, username) == (user.id, "alice")
    assert new_token != token
    [record] = tokens_for(storage, user.id)
    assert record.token_hash == digest_token(new_token)
    assert record.created_at == store_clock.now
    assert record.expires_at - record.created_at == timedelta(days=7)
    with pytest.raises(NotFound):
        manager.rotate(token)


def test_rotate_after_record_vanished_changes_nothing(storage, user, store_clock):
    manager = RefreshTokenManager(storage, clock=store_clock)
    token = manager.generate()
    manager.store(user.id, token)
    record = storage.get_refresh_token(digest_token(token))
    storage.delete_refresh_token(record.id)

    now = store_clock()
    assert storage.rotate_refresh_token(
        record.id, user_id=user.id, token_hash=digest_token("x" * 64), expires_at=now, created_at=now
    ) is False
    assert tokens_for(storage, user.id) == []


def test_rotate_rejects_expired_token(manager, storage, user, store_clock):
    token = manager.generate()
    manager.store(user.id, token)
    store_clock.advance(timedelta(days=8))

    with pytest.raises(Expired):
        manager.rotate(token)
    assert tokens_for(storage, user.id) == []
