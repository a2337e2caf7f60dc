from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_user, logout_user

from tictactoe import get_handler
from tictactoe.errors import ErrorKind, GameError

main = Blueprint('main', __name__)


def caller_name() -> str:
    """Name of the user tied to this HTTP session by a previous register."""
    if not current_user.is_authenticated:
        raise GameError(ErrorKind.NOT_REGISTERED, 'register before calling this endpoint')
    return current_user.name


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GameError(ErrorKind.INVALID_REQUEST, 'request body must be a JSON object')
    return data


@main.route('/')
def index():
    cfg = current_app.config
    return jsonify({
        'message': 'Welcome to the tic-tac-toe server!',
        'poll_interval': cfg.get('CLIENT_POLL_SEC', 1),
        'session_timeout': cfg.get('SESSION_TIMEOUT_SEC', 2),
    })


@main.route('/api/register', methods=['POST'])
def register():
    data = json_body()
    user = get_handler().register(data.get('name'))
    login_user(user)
    return jsonify({'user': user.to_dict()}), 201


@main.route('/api/logout', methods=['POST'])
def logout():
    get_handler().logout(caller_name())
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})


@main.route('/api/poll', methods=['GET'])
def poll():
    state = get_handler().poll(caller_name())
    game = state['game']
    return jsonify({
        'game': game.to_dict() if game else None,
        'lobby': state['lobby'],
    })
