"""
Flask web application exposing a tournament session as a JSON API.
"""
import os
import yaml
from filelock import FileLock
from flask import Flask, request, jsonify, Response
from engine.errors import TournamentError
from engine.export import export_csv
from engine.session import TournamentSession, get_default_settings, ROTATING_DOUBLES

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('ROTATION_DATA_DIR', os.path.join(BASE_DIR, 'data'))

TOURNAMENT_FILE = 'tournament.yaml'
SETTINGS_FILE = 'settings.yaml'


def _file_path(filename: str) -> str:
    """Resolve a data file inside the current data directory."""
    return os.path.join(DATA_DIR, filename)


def _data_lock() -> FileLock:
    os.makedirs(DATA_DIR, exist_ok=True)
    return FileLock(os.path.join(DATA_DIR, '.lock'), timeout=10)


def parse_entries(entries) -> list:
    """Accept a newline-separated string or a list; trim and drop empty lines."""
    if entries is None:
        return []
    if isinstance(entries, str):
        entries = entries.split('\n')
    return [str(e).strip() for e in entries if e is not None and str(e).strip()]


def load_settings() -> dict:
    """Load settings from YAML, filling in defaults."""
    settings = get_default_settings()
    if not os.path.exists(_file_path(SETTINGS_FILE)):
        return settings
    try:
        with open(_file_path(SETTINGS_FILE), 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        app.logger.warning(f'Failed to parse {SETTINGS_FILE}: {e}')
        return settings
    if data:
        settings.update(data)
    return settings


def save_settings(settings: dict):
    """Save settings to YAML file."""
    os.makedirs(DATA_DIR, exist_ok=True)
    with open(_file_path(SETTINGS_FILE), 'w', encoding='utf-8') as f:
        yaml.dump(settings, f, default_flow_style=False)


def load_tournament():
    """Load the persisted session, or None when nothing is stored."""
    if not os.path.exists(_file_path(TOURNAMENT_FILE)):
        return None
    with open(_file_path(TOURNAMENT_FILE), 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        return None
    return TournamentSession.from_dict(data)


def save_tournament(session: TournamentSession):
    """Save the realized schedule and scores to YAML file."""
    os.makedirs(DATA_DIR, exist_ok=True)
    with open(_file_path(TOURNAMENT_FILE), 'w', encoding='utf-8') as f:
        yaml.dump(session.to_dict(), f, default_flow_style=False, allow_unicode=True)


def _session_payload(session: TournamentSession) -> dict:
    payload = session.to_dict()
    if session.mode == ROTATING_DOUBLES:
        payload['ranking'] = session.ranking()
    else:
        payload['standings'] = session.standings()
    return payload


def _no_tournament():
    return jsonify({'success': False, 'error': 'No tournament started.'}), 404


@app.errorhandler(TournamentError)
def handle_tournament_error(e):
    return jsonify({'success': False, 'error': str(e)}), 400


@app.route('/api/settings', methods=['GET'])
def api_settings():
    return jsonify(load_settings())


@app.route('/api/settings/update', methods=['POST'])
def api_update_settings():
    """Update stored defaults (mode, courts, ranked, seed, max_courts)."""
    data = request.get_json() or {}
    settings = load_settings()
    for key in get_default_settings():
        if key in data:
            settings[key] = data[key]
    try:
        settings['courts'] = int(settings['courts'])
        settings['max_courts'] = int(settings['max_courts'])
    except (TypeError, ValueError):
        return jsonify({'success': False, 'error': 'Courts must be whole numbers.'}), 400
    if not isinstance(settings['ranked'], bool):
        return jsonify({'success': False, 'error': 'Ranked must be true or false.'}), 400
    with _data_lock():
        save_settings(settings)
    return jsonify({'success': True, 'settings': settings})


@app.route('/api/tournament', methods=['GET'])
def api_get_tournament():
    session = load_tournament()
    if session is None:
        return jsonify({'tournament': None})
    return jsonify({'tournament': _session_payload(session)})


@app.route('/api/tournament', methods=['POST'])
def api_start_tournament():
    """Start a new tournament from entries and settings, replacing any stored one."""
    data = request.get_json() or {}
    settings = load_settings()
    entries = parse_entries(data.get('entries'))
    try:
        courts = int(data.get('courts', settings['courts']))
    except (TypeError, ValueError):
        return jsonify({'success': False, 'error': 'Courts must be a whole number.'}), 400
    ranked = data.get('ranked', settings['ranked'])
    if not isinstance(ranked, bool):
        return jsonify({'success': False, 'error': 'Ranked must be true or false.'}), 400

    session = TournamentSession(
        entries,
        courts,
        mode=data.get('mode', settings['mode']),
        ranked=ranked,
        seed=data.get('seed', settings['seed']),
        max_courts=settings['max_courts'],
    )
    session.start()
    with _data_lock():
        save_tournament(session)
    app.logger.info(f'Started {session.mode} tournament with {len(entries)} entries on {session.courts} courts')
    return jsonify({'success': True, 'tournament': _session_payload(session)})


@app.route('/api/rounds/next', methods=['POST'])
def api_next_round():
    with _data_lock():
        session = load_tournament()
        if session is None:
            return _no_tournament()
        rnd = session.next_round()
        save_tournament(session)
    return jsonify({'success': True, 'round': rnd.to_dict(), 'tournament': _session_payload(session)})


@app.route('/api/scores', methods=['POST'])
def api_enter_score():
    """Enter one side's score: {round, court, side, score}, zero-based indexes."""
    data = request.get_json() or {}
    try:
        round_index = int(data['round'])
        court_index = int(data['court'])
    except (KeyError, TypeError, ValueError):
        return jsonify({'success': False, 'error': 'Round and court are required.'}), 400

    with _data_lock():
        session = load_tournament()
        if session is None:
            return _no_tournament()
        try:
            match = session.enter_score(round_index, court_index, data.get('side', 'a'), data.get('score'))
        except IndexError as e:
            return jsonify({'success': False, 'error': str(e)}), 404
        save_tournament(session)
    return jsonify({'success': True, 'match': match.to_dict()})


@app.route('/api/ranking', methods=['GET'])
def api_ranking():
    session = load_tournament()
    if session is None:
        return _no_tournament()
    return jsonify({'ranking': session.ranking()})


@app.route('/api/standings', methods=['GET'])
def api_standings():
    session = load_tournament()
    if session is None:
        return _no_tournament()
    return jsonify({'standings': session.standings()})


@app.route('/api/export', methods=['GET'])
def api_export():
    """Download the tournament as CSV."""
    session = load_tournament()
    if session is None:
        return _no_tournament()
    filename = 'tournament_export.csv' if session.mode != ROTATING_DOUBLES else 'americano_export.csv'
    return Response(
        export_csv(session),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@app.route('/api/reset', methods=['POST'])
def api_reset_all():
    """Reset all tournament data."""
    with _data_lock():
        if os.path.exists(_file_path(TOURNAMENT_FILE)):
            os.remove(_file_path(TOURNAMENT_FILE))
    return jsonify({'success': True})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
