from flask import Blueprint, jsonify

from tictactoe import get_handler, socketio
from tictactoe.main import caller_name, json_body

games = Blueprint('games', __name__)


def _notify(game_name: str) -> None:
    socketio.emit('state_update', {'game': game_name}, to=f"game:{game_name}", namespace='/ws')


@games.route('/open', methods=['GET'])
def list_open_games():
    """
    Returns host names of games still waiting for an opponent.
    """
    return jsonify({'games': get_handler().list_open_games(caller_name())})


@games.route('/create', methods=['POST'])
def create_game():
    """
    Creates a new game with the caller as its first player (X).
    """
    snapshot = get_handler().create_game(caller_name())
    return jsonify(snapshot.to_dict()), 201


@games.route('/join', methods=['POST'])
def join_game():
    """
    Joins the game hosted by another user, identified by their name.
    """
    data = json_body()
    snapshot = get_handler().join_game(caller_name(), data.get('host'))
    _notify(snapshot.name)
    return jsonify(snapshot.to_dict())


@games.route('/mark', methods=['POST'])
def mark():
    data = json_body()
    snapshot = get_handler().mark(caller_name(), data.get('row'), data.get('col'))
    _notify(snapshot.name)
    return jsonify(snapshot.to_dict())


@games.route('/quit', methods=['POST'])
def quit_game():
    """
    Leaves the caller's game. An opponent left alone in a started game wins.
    """
    handler = get_handler()
    name = caller_name()
    snapshot = handler.get_game_state(name)
    handler.quit_game(name)
    if snapshot:
        _notify(snapshot.name)
    return jsonify({'message': 'You have left the game.'})


@games.route('/state', methods=['GET'])
def get_game_state():
    snapshot = get_handler().get_game_state(caller_name())
    return jsonify({'game': snapshot.to_dict() if snapshot else None})
