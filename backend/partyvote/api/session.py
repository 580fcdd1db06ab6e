from flask import Blueprint, current_app, jsonify

session_api = Blueprint('session_api', __name__)


def _session():
    return current_app.extensions['party_session']


@session_api.route('/state', methods=['GET'])
def get_session_state():
    """
    Returns the same snapshot a socket receives as ``game-state`` on connect.
    """
    return jsonify(_session().snapshot())


@session_api.route('/public-url', methods=['GET'])
def get_public_url():
    return jsonify({'url': current_app.extensions['party_public_url']})


@session_api.route('/health', methods=['GET'])
def health():
    session = _session()
    with session.lock:
        return jsonify({
            'status': 'ok',
            'phase': session.phase.value,
            'players': session.registry.count(),
        })
