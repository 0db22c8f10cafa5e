from flask import Blueprint, current_app, jsonify, request
from sudokuroom.events import NOOP, event_kind, parse_event


session_api = Blueprint('session_api', __name__)


def _engine():
    return current_app.extensions['session_engine']


@session_api.route('/session', methods=['GET'])
def get_session_state():
    snapshot = _engine().snapshot()
    if snapshot is None:
        return jsonify({'error': 'No round in progress'}), 404
    # Include timer settings so clients can show countdowns
    cfg = current_app.config
    snapshot['durations'] = {
        'round_min': float(cfg.get('ROUND_DURATION_MIN', 10)),
        'check_interval_sec': float(cfg.get('CHECK_INTERVAL_SEC', 2.5)),
        'restart_delay_sec': float(cfg.get('RESTART_DELAY_SEC', 5)),
    }
    return jsonify(snapshot)


@session_api.route('/events', methods=['POST'])
def post_event():
    """Feeds one raw wire event through the parser into the engine.

    Malformed bodies are treated like any other unparseable event, and so
    are edits aimed at a fixed cell.
    """
    engine = _engine()
    event = parse_event(request.get_json(silent=True))
    if engine.targets_fixed_cell(event):
        current_app.logger.debug(f"[event-skip] {event!r} targets a fixed cell")
        event = NOOP
    engine.apply_event(event)
    return jsonify({'event': event_kind(event)})
