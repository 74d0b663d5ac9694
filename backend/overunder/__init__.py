from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from overunder.config import Config
from overunder.sessions import GameRegistry

registry = GameRegistry()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    # Loads the dataset; a bad or unplayable file is fatal here
    registry.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from overunder.main import main
    flask_app.register_blueprint(main)

    from overunder.api.games import games
    # Mount game routes under /api to match frontend API client
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from overunder.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('check-dataset')
    def check_dataset_command():
        """Reports how much of the dataset is playable."""
        records = registry.records
        eligible = [r for r in records if r.count > registry.min_count]
        click.echo(f"Dataset: {flask_app.config['DATASET_PATH']}")
        click.echo(f"Records: {len(records)}")
        click.echo(f"Eligible (count > {registry.min_count}): {len(eligible)}")
        click.echo(f"Count range: {min(r.count for r in eligible)}-{max(r.count for r in eligible)}")

    flask_app.cli.add_command(check_dataset_command)

    return flask_app
