from flask import Flask, current_app, jsonify
from flask_login import LoginManager
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config
from tictactoe.errors import GameError
from tictactoe.services.games.handler import RequestHandler
from tictactoe.services.games.store import GameStore
from tictactoe.services.games.sweeper import LivenessSweeper

login_manager = LoginManager()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def get_services(app=None) -> dict:
    """The store, handler and sweeper owned by the given (or current) app."""
    return (app or current_app).extensions['tictactoe']


def get_handler(app=None) -> RequestHandler:
    return get_services(app)['handler']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    login_manager.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    store = GameStore.from_config(flask_app.config, logger=flask_app.logger)
    sweeper = LivenessSweeper(
        store,
        interval=float(flask_app.config.get('SWEEP_INTERVAL_SEC', 2)),
        sleep=socketio.sleep,
    )
    flask_app.extensions['tictactoe'] = {
        'store': store,
        'handler': RequestHandler(store),
        'sweeper': sweeper,
        'sockets': {},
    }

    from tictactoe.main import main
    flask_app.register_blueprint(main)

    from tictactoe.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    from tictactoe.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @login_manager.user_loader
    def load_user(name):
        with store.lock:
            entry = store.registry.entry(name)
        return entry.user if entry else None

    @click.command('sessions')
    def sessions_command():
        """Lists registered users and live games."""
        with store.lock:
            now = store.clock()
            for entry in store.registry.entries():
                state = 'online' if entry.logged_in else 'offline'
                click.echo(f'{entry.user.name}\t{state}\tidle {now - entry.last_seen:.1f}s')
            for game in store.matchmaker.games():
                players = ', '.join(f'{p.name} ({p.symbol.value})' for p in game.participants)
                click.echo(f'{game.name}\t{game.status}\t{game.occupancy}\t{players}')

    @click.command('sweep')
    def sweep_command():
        """Runs one liveness sweep now."""
        evicted = sweeper.sweep()
        click.echo(f'Evicted {len(evicted)} user(s)' + (': ' + ', '.join(evicted) if evicted else ''))

    flask_app.cli.add_command(sessions_command)
    flask_app.cli.add_command(sweep_command)

    if not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_SWEEPER_IN_TESTS'):
        sweeper.start(socketio.start_background_task)

    return flask_app
