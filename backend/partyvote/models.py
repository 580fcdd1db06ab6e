from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Phase(str, Enum):
    LOBBY = 'lobby'
    VOTING = 'voting'
    RESULTS = 'results'


class Role(str, Enum):
    HOST = 'host'
    PLAYER = 'player'


@dataclass
class Participant:
    id: str
    name: str

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
        }


@dataclass
class Vote:
    voter_id: str
    target_id: str

    def to_dict(self):
        return {
            'voterId': self.voter_id,
            'targetId': self.target_id,
        }


@dataclass
class ResultEntry:
    participant_id: str
    name: str
    vote_count: int = 0

    def to_dict(self):
        return {
            'playerId': self.participant_id,
            'playerName': self.name,
            'voteCount': self.vote_count,
        }


@dataclass
class Message:
    """One outbound event. ``broadcast`` False means reply to the sender only."""
    event: str
    payload: Any = None
    broadcast: bool = True


@dataclass
class Outcome:
    messages: List[Message] = field(default_factory=list)

    def broadcast(self, event: str, payload: Any = None) -> 'Outcome':
        self.messages.append(Message(event, payload, broadcast=True))
        return self

    def reply(self, event: str, payload: Any = None) -> 'Outcome':
        self.messages.append(Message(event, payload, broadcast=False))
        return self

    def events(self) -> List[str]:
        return [m.event for m in self.messages]


class SessionError(Exception):
    """A trigger the session refuses in its current state.

    ``code`` is a short machine-readable tag sent to the client in the
    ``error`` event alongside the human message.
    """

    def __init__(self, code: str, message: str, event: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.event = event

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event': self.event,
            'code': self.code,
            'message': self.message,
        }
