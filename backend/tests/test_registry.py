import pytest

from wordplay.services.sessions import ManualClock, Phase, SessionAlreadyActive, SessionRegistry


@pytest.fixture()
def registry():
    return SessionRegistry(ManualClock(start=100.0))


def test_create_stores_joining_session(registry):
    session = registry.create('chan-1', 'unscramble')
    assert session.phase is Phase.JOINING
    assert session.generation == 0
    assert session.created_at == 100.0
    assert registry.get('chan-1') is session
    assert 'chan-1' in registry
    assert len(registry) == 1


def test_second_create_on_same_channel_fails(registry):
    first = registry.create('chan-1', 'unscramble')
    with pytest.raises(SessionAlreadyActive):
        registry.create('chan-1', 'wordchain')
    assert registry.get('chan-1') is first


def test_channels_are_independent(registry):
    a = registry.create('chan-a', 'unscramble')
    b = registry.create('chan-b', 'wordchain')
    assert a is not b
    assert sorted(registry.channels()) == ['chan-a', 'chan-b']


def test_get_unknown_channel_returns_none(registry):
    assert registry.get('nope') is None


def test_remove_is_idempotent(registry):
    registry.create('chan-1', 'unscramble')
    assert registry.remove('chan-1') is True
    assert registry.remove('chan-1') is False
    assert registry.get('chan-1') is None


def test_remove_with_old_instance_keeps_newer_session(registry):
    old = registry.create('chan-1', 'unscramble')
    registry.remove('chan-1')
    new = registry.create('chan-1', 'unscramble')
    assert registry.remove('chan-1', old) is False
    assert registry.get('chan-1') is new
    assert old.token != new.token
