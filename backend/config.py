import os

def _env_flag(name, default):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    ALLOWED_ORIGINS = [o.strip() for o in os.environ.get('ALLOWED_ORIGINS', 'http://localhost:9000,http://127.0.0.1:9000').split(',') if o.strip()]
    # Round timing
    ROUND_DURATION_MIN = float(os.environ.get('ROUND_DURATION_MIN', '10'))
    CHECK_INTERVAL_SEC = float(os.environ.get('CHECK_INTERVAL_SEC', '2.5'))
    RESTART_DELAY_SEC = float(os.environ.get('RESTART_DELAY_SEC', '5'))
    # EASY, MEDIUM, HARD or EXPERT
    PUZZLE_DIFFICULTY = os.environ.get('PUZZLE_DIFFICULTY', 'EASY')
    # Start the first round as soon as the app is created
    ENGINE_AUTOSTART = _env_flag('ENGINE_AUTOSTART', 'true')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
