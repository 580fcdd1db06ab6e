import os


def _flag(name, default):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Address players scan to join. Empty means detect the LAN address.
    PUBLIC_URL = os.environ.get('PUBLIC_URL', '')
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Minimum players needed to open a voting round
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '20'))
    # Host-only events (start-game, show-results, next-round) require join-host first
    ENFORCE_HOST_ROLE = _flag('ENFORCE_HOST_ROLE', 'true')
    # Optional shared secret for join-host. Empty disables the check.
    HOST_KEY = os.environ.get('HOST_KEY', '')
    # Drop votes cast by or for a player who disconnects mid-round
    PURGE_VOTES_ON_DISCONNECT = _flag('PURGE_VOTES_ON_DISCONNECT', 'true')
