from flask import current_app, request
from flask_socketio import emit

from partyvote import socketio
from partyvote.models import Outcome, SessionError
from partyvote.services.session import SessionStateMachine


def get_session() -> SessionStateMachine:
    return current_app.extensions['party_session']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _namespace() -> str:
    return current_app.config.get('SOCKETIO_NAMESPACE', '/')


def _field(data, key):
    """Browser clients send bare strings; other clients send ``{key: value}``."""
    if isinstance(data, dict):
        return data.get(key)
    return data


def _deliver(outcome: Outcome) -> None:
    namespace = _namespace()
    for message in outcome.messages:
        args = () if message.payload is None else (message.payload,)
        if message.broadcast:
            socketio.emit(message.event, *args, namespace=namespace)
        else:
            emit(message.event, *args, namespace=namespace)


def _dispatch(trigger, *args) -> None:
    """Apply one client trigger and deliver its messages while holding the
    session lock, so every client sees events in the order they happened."""
    session = get_session()
    with session.lock:
        try:
            outcome = trigger(_get_sid(), *args)
        except SessionError as exc:
            current_app.logger.info(f"[reject] sid={_get_sid()} event={exc.event} code={exc.code}")
            emit('error', exc.to_dict(), namespace=_namespace())
            return
        _deliver(outcome)


def handle_connect(auth=None):
    session = get_session()
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    _dispatch(session.connect, current_app.extensions['party_public_url'])


def handle_disconnect(reason=None):
    _dispatch(get_session().disconnect)


def handle_join_host(data=None):
    _dispatch(get_session().join_host, _field(data, 'key'))


def handle_join_game(data=None):
    _dispatch(get_session().join_game, _field(data, 'name'))


def handle_start_game(data=None):
    _dispatch(get_session().start_game, _field(data, 'question'))


def handle_submit_vote(data=None):
    _dispatch(get_session().submit_vote, _field(data, 'targetId'))


def handle_show_results(data=None):
    _dispatch(get_session().show_results)


def handle_next_round(data=None):
    _dispatch(get_session().next_round, _field(data, 'question'))


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join-host', handle_join_host, namespace=namespace)
    socketio.on_event('join-game', handle_join_game, namespace=namespace)
    socketio.on_event('start-game', handle_start_game, namespace=namespace)
    socketio.on_event('submit-vote', handle_submit_vote, namespace=namespace)
    socketio.on_event('show-results', handle_show_results, namespace=namespace)
    socketio.on_event('next-round', handle_next_round, namespace=namespace)
