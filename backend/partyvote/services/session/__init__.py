"""Session domain services: participant registry, vote ledger and the
session state machine.

Nothing in this package touches Flask or Socket.IO. Handlers in
``partyvote.socketio_events`` translate client events into calls on
``SessionStateMachine`` and deliver the ``Outcome`` it returns.
"""

from .registry import ParticipantRegistry
from .ledger import VoteLedger
from .state_machine import SessionStateMachine

__all__ = ['ParticipantRegistry', 'VoteLedger', 'SessionStateMachine']
