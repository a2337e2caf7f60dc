import pytest

from tictactoe.errors import ErrorKind, GameError
from tictactoe.models import EMPTY, NOT_STARTED, Game, Outcome, Symbol, User

alice = User('alice')
bob = User('bob')
carol = User('carol')


def new_game():
    game = Game("alice's game")
    game.join(alice)
    return game


def active_game():
    game = new_game()
    game.join(bob)
    return game


def test_symbols_follow_join_order():
    game = Game("alice's game")
    assert game.join(alice) is Symbol.X
    assert game.turn == NOT_STARTED
    assert game.status == 'forming'
    assert game.join(bob) is Symbol.O
    assert game.turn == 0
    assert game.status == 'active'
    assert [p.symbol for p in game.participants] == [Symbol.X, Symbol.O]


def test_join_full_game_reports_occupancy():
    game = active_game()
    with pytest.raises(GameError) as err:
        game.join(carol)
    assert err.value.kind is ErrorKind.GAME_FULL
    assert '2/2 players' in err.value.message
    assert len(game.participants) == 2


def test_mark_before_start():
    game = new_game()
    with pytest.raises(GameError) as err:
        game.mark('alice', 0, 0)
    assert err.value.kind is ErrorKind.NOT_STARTED
    assert game.board.moves == 0


def test_wrong_turn_leaves_board_unchanged():
    game = active_game()
    before = game.board.rows()
    with pytest.raises(GameError) as err:
        game.mark('bob', 0, 0)
    assert err.value.kind is ErrorKind.WRONG_TURN
    assert game.board.rows() == before
    assert game.turn == 0

    game.mark('alice', 0, 0)
    with pytest.raises(GameError) as err:
        game.mark('alice', 0, 1)
    assert err.value.kind is ErrorKind.WRONG_TURN
    assert game.board.cells[0][1] == EMPTY


def test_occupied_cell_does_not_advance_turn():
    game = active_game()
    game.mark('alice', 1, 1)
    with pytest.raises(GameError) as err:
        game.mark('bob', 1, 1)
    assert err.value.kind is ErrorKind.CELL_OCCUPIED
    assert game.turn == 1
    assert game.current_participant().name == 'bob'


def test_mark_by_outsider():
    game = active_game()
    with pytest.raises(GameError) as err:
        game.mark('carol', 0, 0)
    assert err.value.kind is ErrorKind.NOT_IN_GAME


def test_winning_move_sets_winner_and_freezes_board():
    game = active_game()
    for name, r, c in [('alice', 0, 0), ('bob', 1, 1), ('alice', 0, 1), ('bob', 2, 2)]:
        assert game.mark(name, r, c) is Outcome.CONTINUE
    assert game.mark('alice', 0, 2) is Outcome.WIN
    assert game.winner == alice
    assert game.status == 'won'
    assert game.current_participant() is None

    before = game.board.rows()
    with pytest.raises(GameError) as err:
        game.mark('bob', 2, 0)
    assert err.value.kind is ErrorKind.ALREADY_WON
    assert game.board.rows() == before


def test_draw_has_no_winner():
    game = active_game()
    moves = [(0, 0), (0, 1), (0, 2), (1, 1), (1, 0), (1, 2), (2, 1), (2, 0)]
    for i, (r, c) in enumerate(moves):
        name = 'alice' if i % 2 == 0 else 'bob'
        assert game.mark(name, r, c) is Outcome.CONTINUE
    assert game.mark('alice', 2, 2) is Outcome.DRAW
    assert game.winner is None
    assert game.is_draw
    assert game.status == 'draw'
    for name in ('alice', 'bob'):
        with pytest.raises(GameError) as err:
            game.mark(name, 0, 0)
        assert err.value.kind is ErrorKind.GAME_OVER


def test_remove_from_active_game_is_forfeit():
    game = active_game()
    game.mark('alice', 0, 0)
    assert game.remove('alice') is True
    assert game.winner == bob
    assert game.status == 'won'


def test_remove_unknown_user_is_noop():
    game = active_game()
    assert game.remove('carol') is False
    assert len(game.participants) == 2
    assert game.winner is None


def test_remove_sole_participant_of_forming_game():
    game = new_game()
    assert game.remove('alice') is True
    assert game.participants == []
    assert game.winner is None


def test_terminal_game_is_absorbing_on_remove():
    game = active_game()
    for name, r, c in [('alice', 0, 0), ('bob', 1, 1), ('alice', 0, 1), ('bob', 2, 2), ('alice', 0, 2)]:
        game.mark(name, r, c)
    turn = game.turn
    game.remove('alice')
    assert game.winner == alice
    assert game.turn == turn
    game.remove('bob')
    assert game.participants == []
    assert game.winner == alice


def test_snapshot_is_detached():
    game = active_game()
    snap = game.snapshot()
    game.mark('alice', 0, 0)
    assert snap.board[0][0] == EMPTY
    assert snap.turn == 0
    assert snap.current_player == 'alice'
    data = snap.to_dict()
    assert data['players'] == [{'name': 'alice', 'symbol': 'X'}, {'name': 'bob', 'symbol': 'O'}]
    assert data['status'] == 'active'
    assert data['winner'] is None
