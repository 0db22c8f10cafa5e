from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, puzzle_source=None, scheduler=None, clock=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('ALLOWED_ORIGINS', [])
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from sudokuroom.broadcast import ObserverRegistry, SocketIOBroadcaster
    from sudokuroom.services.puzzles import SessionEngine
    from sudokuroom.services.puzzles.scheduler import SocketIOScheduler

    if puzzle_source is None:
        from sudokuroom.services.puzzles.source import SudokuSource
        puzzle_source = SudokuSource()

    registry = ObserverRegistry()
    engine_kwargs = {'clock': clock} if clock is not None else {}
    engine = SessionEngine(
        source=puzzle_source,
        broadcaster=SocketIOBroadcaster(socketio, registry, logger=flask_app.logger),
        scheduler=scheduler or SocketIOScheduler(socketio, logger=flask_app.logger),
        round_duration_sec=float(flask_app.config['ROUND_DURATION_MIN']) * 60,
        check_interval_sec=float(flask_app.config['CHECK_INTERVAL_SEC']),
        restart_delay_sec=float(flask_app.config['RESTART_DELAY_SEC']),
        difficulty=flask_app.config['PUZZLE_DIFFICULTY'],
        logger=flask_app.logger,
        **engine_kwargs,
    )
    flask_app.extensions['session_engine'] = engine
    flask_app.extensions['observers'] = registry

    # Import and register blueprints here
    from sudokuroom.main import main
    flask_app.register_blueprint(main)

    from sudokuroom.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api')

    # Register Socket.IO event handlers
    from sudokuroom.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('puzzle-preview')
    def puzzle_preview_command():
        """Generates one puzzle and prints it with its solution."""
        from sudokuroom.render import render_text_board
        from sudokuroom.services.puzzles import PuzzleError
        try:
            puzzle = puzzle_source.generate(flask_app.config['PUZZLE_DIFFICULTY'])
        except PuzzleError as exc:
            raise click.ClickException(str(exc))
        size = len(puzzle.grid)
        solution = [puzzle.solution[i:i + size] for i in range(0, len(puzzle.solution), size)]
        click.echo(render_text_board(puzzle.grid))
        click.echo()
        click.echo(render_text_board(solution))

    flask_app.cli.add_command(puzzle_preview_command)

    if flask_app.config.get('ENGINE_AUTOSTART') and not flask_app.config.get('TESTING'):
        socketio.start_background_task(engine.start_round_or_report)

    return flask_app
