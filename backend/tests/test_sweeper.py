import pytest

from tictactoe.errors import ErrorKind, GameError
from tictactoe.services.games.handler import RequestHandler
from tictactoe.services.games.sweeper import LivenessSweeper


def _start_match(handler):
    handler.register('alice')
    handler.register('bob')
    handler.create_game('alice')
    handler.join_game('bob', 'alice')


def test_sweep_evicts_stale_user_and_forfeits(store, clock):
    handler = RequestHandler(store)
    sweeper = LivenessSweeper(store, interval=2)
    _start_match(handler)

    clock.advance(1)
    handler.get_game_state('bob')
    clock.advance(1.5)

    assert sweeper.sweep() == ['alice']
    assert not store.registry.entry('alice').logged_in
    assert store.registry.entry('bob').logged_in

    snapshot = handler.get_game_state('bob')
    assert snapshot.winner == 'bob'
    assert [p.name for p in snapshot.participants] == ['bob']

    with pytest.raises(GameError) as err:
        handler.get_game_state('alice')
    assert err.value.kind is ErrorKind.NOT_LOGGED_IN


def test_sweep_respects_timeout_boundary(store, clock):
    handler = RequestHandler(store)
    sweeper = LivenessSweeper(store)
    handler.register('alice')
    clock.advance(2)
    assert sweeper.sweep() == []
    clock.advance(0.01)
    assert sweeper.sweep() == ['alice']
    # Already logged out: a later pass does nothing
    clock.advance(10)
    assert sweeper.sweep() == []


def test_sweep_user_without_game(store, clock):
    handler = RequestHandler(store)
    sweeper = LivenessSweeper(store)
    handler.register('loner')
    handler.register('host')
    handler.create_game('host')
    clock.advance(5)
    assert sorted(sweeper.sweep()) == ['host', 'loner']
    # The forming game lost its only player and is gone
    assert store.matchmaker.games() == []


def test_evicted_user_can_register_again(store, clock):
    handler = RequestHandler(store)
    sweeper = LivenessSweeper(store)
    handler.register('x')
    with pytest.raises(GameError) as err:
        handler.register('x')
    assert err.value.kind is ErrorKind.NAME_IN_USE

    clock.advance(3)
    sweeper.sweep()
    user = handler.register('x')
    assert user.name == 'x'
    assert len(store.registry) == 1
    assert store.registry.entry('x').logged_in


def test_run_loop_stops_between_ticks(store, clock):
    handler = RequestHandler(store)
    handler.register('alice')
    clock.advance(3)

    naps = []

    def fake_sleep(seconds):
        naps.append(seconds)
        if len(naps) == 2:
            sweeper.stop()

    sweeper = LivenessSweeper(store, interval=2, sleep=fake_sleep)
    sweeper.start(lambda fn: fn())

    assert naps == [2, 2]
    assert not sweeper.running
    assert not store.registry.entry('alice').logged_in


def test_sweeper_not_started_in_tests(services):
    assert services['sweeper'].running is False
    assert services['sweeper'].interval == 2
    assert services['sweeper'].timeout == 2
