from functools import wraps

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from tictactoe import get_handler, get_services, socketio
from tictactoe.errors import ErrorKind, GameError

NAMESPACE = '/ws'


def _room(game_name: str) -> str:
    return f"game:{game_name}"


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _sockets() -> dict:
    return get_services()['sockets']


def _notify(game_name: str) -> None:
    socketio.emit('state_update', {'game': game_name}, to=_room(game_name), namespace=NAMESPACE)


def _ack(fn):
    """Turn a handler's return value (or GameError) into the acknowledgement payload."""
    @wraps(fn)
    def wrapper(data=None):
        try:
            if data is None:
                data = {}
            elif not isinstance(data, dict):
                raise GameError(ErrorKind.INVALID_REQUEST, 'event payload must be an object')
            payload = fn(data)
        except GameError as exc:
            current_app.logger.info(f"[ws-refused] event={fn.__name__} kind={exc.kind.value} {exc.message}")
            return {'ok': False, **exc.to_dict()}
        return {'ok': True, **(payload or {})}
    return wrapper


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # Closing the connection counts as an explicit disconnect: log out and forfeit
    owner = _sockets().pop(_get_sid(), None)
    if not owner:
        return
    name, session = owner
    game_name = _game_name(name)
    if get_handler().disconnect(name, session=session) and game_name:
        _notify(game_name)


def _game_name(name):
    store = get_services()['store']
    with store.lock:
        game = store.matchmaker.game_for(name)
        return game.name if game else None


@_ack
def handle_register(data):
    handler = get_handler()
    with get_services()['store'].lock:
        user = handler.register(data.get('name'))
        _sockets()[_get_sid()] = (user.name, handler.session_of(user.name))
    return {'user': user.to_dict()}


@_ack
def handle_list_games(data):
    return {'games': get_handler().list_open_games(data.get('name'))}


@_ack
def handle_create_game(data):
    snapshot = get_handler().create_game(data.get('name'))
    join_room(_room(snapshot.name))
    return {'game': snapshot.to_dict()}


@_ack
def handle_join_game(data):
    snapshot = get_handler().join_game(data.get('name'), data.get('host'))
    join_room(_room(snapshot.name))
    _notify(snapshot.name)
    return {'game': snapshot.to_dict()}


@_ack
def handle_mark(data):
    snapshot = get_handler().mark(data.get('name'), data.get('row'), data.get('col'))
    _notify(snapshot.name)
    return {'game': snapshot.to_dict()}


@_ack
def handle_quit_game(data):
    handler = get_handler()
    name = data.get('name')
    game_name = _game_name(name)
    handler.quit_game(name)
    if game_name:
        leave_room(_room(game_name))
        _notify(game_name)


@_ack
def handle_get_game(data):
    snapshot = get_handler().get_game_state(data.get('name'))
    return {'game': snapshot.to_dict() if snapshot else None}


@_ack
def handle_poll(data):
    state = get_handler().poll(data.get('name'))
    game = state['game']
    return {'game': game.to_dict() if game else None, 'lobby': state['lobby']}


@_ack
def handle_logout(data):
    handler = get_handler()
    name = data.get('name')
    game_name = _game_name(name)
    handler.logout(name)
    _sockets().pop(_get_sid(), None)
    if game_name:
        leave_room(_room(game_name))
        _notify(game_name)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('register', handle_register, namespace=NAMESPACE)
    socketio.on_event('list_games', handle_list_games, namespace=NAMESPACE)
    socketio.on_event('create_game', handle_create_game, namespace=NAMESPACE)
    socketio.on_event('join_game', handle_join_game, namespace=NAMESPACE)
    socketio.on_event('mark', handle_mark, namespace=NAMESPACE)
    socketio.on_event('quit_game', handle_quit_game, namespace=NAMESPACE)
    socketio.on_event('get_game', handle_get_game, namespace=NAMESPACE)
    socketio.on_event('poll', handle_poll, namespace=NAMESPACE)
    socketio.on_event('logout', handle_logout, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
