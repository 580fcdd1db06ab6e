import logging
import threading
from typing import Dict, FrozenSet, List, Optional, Set

from partyvote.models import Outcome, Phase, ResultEntry, Role, SessionError
from .ledger import VoteLedger
from .registry import ParticipantRegistry


# Phase-bound triggers. join-game and join-host are accepted in every phase.
_ALLOWED: Dict[Phase, FrozenSet[str]] = {
    Phase.LOBBY: frozenset({'start-game'}),
    Phase.VOTING: frozenset({'submit-vote', 'show-results'}),
    Phase.RESULTS: frozenset({'next-round'}),
}

_HOST_EVENTS = frozenset({'start-game', 'show-results', 'next-round'})


class SessionStateMachine:
    """Owner of the single shared game session.

    Every trigger runs under ``lock`` and returns an ``Outcome`` listing the
    messages to deliver. Guard failures raise ``SessionError``; inputs the
    session simply ignores (blank names, repeat votes, unknown sockets)
    return an empty ``Outcome``.
    """

    def __init__(
        self,
        min_players: int = 2,
        max_name_length: int = 20,
        enforce_host_role: bool = True,
        host_key: str = '',
        purge_votes_on_disconnect: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.min_players = min_players
        self.enforce_host_role = enforce_host_role
        self.host_key = host_key
        self.purge_votes_on_disconnect = purge_votes_on_disconnect
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()

        self.registry = ParticipantRegistry(max_name_length=max_name_length)
        self.ledger = VoteLedger()
        self.phase = Phase.LOBBY
        self.current_question = ''
        self.results: List[ResultEntry] = []
        self._hosts: Set[str] = set()

    @classmethod
    def from_config(cls, config, logger=None) -> 'SessionStateMachine':
        return cls(
            min_players=int(config.get('MIN_PLAYERS', 2)),
            max_name_length=int(config.get('MAX_NAME_LENGTH', 20)),
            enforce_host_role=bool(config.get('ENFORCE_HOST_ROLE', True)),
            host_key=config.get('HOST_KEY', '') or '',
            purge_votes_on_disconnect=bool(config.get('PURGE_VOTES_ON_DISCONNECT', True)),
            logger=logger,
        )

    # ---- Queries ----

    def role_of(self, sid: str) -> Optional[Role]:
        if sid in self._hosts:
            return Role.HOST
        if sid in self.registry:
            return Role.PLAYER
        return None

    def vote_count(self) -> Dict[str, int]:
        # Votes left behind by departed players (purge disabled) are not counted
        current = sum(1 for vote in self.ledger.votes() if vote.voter_id in self.registry)
        return {'current': current, 'total': self.registry.count()}

    def snapshot(self) -> Dict:
        with self.lock:
            return {
                'phase': self.phase.value,
                'players': self.registry.to_list(),
                'currentQuestion': self.current_question,
                'votes': [v.to_dict() for v in self.ledger.votes()],
                'results': [r.to_dict() for r in self.results],
                'voteCount': self.vote_count(),
            }

    # ---- Triggers ----

    def connect(self, sid: str, public_url: str) -> Outcome:
        """Bring a new connection up to date without a separate sync step."""
        with self.lock:
            return Outcome().reply('game-state', self.snapshot()).reply('public-url', public_url)

    def join_host(self, sid: str, key: Optional[str] = None) -> Outcome:
        with self.lock:
            if sid in self.registry:
                raise SessionError('role-conflict', 'Players cannot take over the host screen', 'join-host')
            if self.host_key and key != self.host_key:
                raise SessionError('forbidden', 'Invalid host key', 'join-host')
            self._hosts.add(sid)
            self.logger.info(f"[host] sid={sid} hosts={len(self._hosts)}")
            return Outcome().reply('host-confirmed', {'phase': self.phase.value})

    def join_game(self, sid: str, name) -> Outcome:
        with self.lock:
            if sid in self._hosts:
                raise SessionError('role-conflict', 'The host screen cannot join as a player', 'join-game')
            participant = self.registry.add_participant(sid, name)
            if participant is None:
                self.logger.info(f"[join-ignored] sid={sid} name={name!r:.40}")
                return Outcome()
            self.logger.info(f"[join] {participant.name} ({sid}) players={self.registry.count()}")
            outcome = Outcome()
            outcome.broadcast('player-joined', participant.to_dict())
            outcome.broadcast('players-update', self.registry.to_list())
            return outcome

    def start_game(self, sid: str, question) -> Outcome:
        with self.lock:
            self._guard(sid, 'start-game')
            if self.registry.count() < self.min_players:
                raise SessionError(
                    'not-enough-players',
                    f"At least {self.min_players} players are needed",
                    'start-game',
                )
            return self._open_round(question, 'start-game')

    def next_round(self, sid: str, question) -> Outcome:
        with self.lock:
            self._guard(sid, 'next-round')
            return self._open_round(question, 'next-round')

    def submit_vote(self, sid: str, target_id) -> Outcome:
        with self.lock:
            self._guard(sid, 'submit-vote')
            if not isinstance(target_id, str) or target_id not in self.registry:
                raise SessionError('unknown-target', 'That player is not in the game', 'submit-vote')
            tally = self.ledger.record_vote(sid, target_id, self.registry.count())
            if tally is None:
                self.logger.info(f"[vote-duplicate] sid={sid} already voted")
                return Outcome()
            count = self.vote_count()
            self.logger.info(f"[vote] {sid} -> {target_id} ({count['current']}/{count['total']})")
            outcome = Outcome()
            outcome.broadcast('vote-count-update', count)
            outcome.reply('vote-confirmed')
            return outcome

    def show_results(self, sid: str) -> Outcome:
        with self.lock:
            self._guard(sid, 'show-results')
            self.phase = Phase.RESULTS
            self.results = self.ledger.tally(self.registry.list())
            self.logger.info(
                "[results] " + ', '.join(f"{r.name}={r.vote_count}" for r in self.results)
            )
            return Outcome().broadcast('results-ready', [r.to_dict() for r in self.results])

    def disconnect(self, sid: str) -> Outcome:
        with self.lock:
            if sid in self._hosts:
                self._hosts.discard(sid)
                self.logger.info(f"[host-left] sid={sid} hosts={len(self._hosts)}")
                return Outcome()
            participant = self.registry.remove_participant(sid)
            if participant is None:
                self.logger.info(f"[disconnect] sid={sid} (not a player)")
                return Outcome()
            purged = 0
            if self.purge_votes_on_disconnect:
                purged = self.ledger.purge(sid)
            self.logger.info(f"[disconnect] {participant.name} ({sid}) purged_votes={purged}")
            outcome = Outcome()
            outcome.broadcast('player-left', sid)
            outcome.broadcast('players-update', self.registry.to_list())
            if self.phase == Phase.VOTING:
                outcome.broadcast('vote-count-update', self.vote_count())
            return outcome

    # ---- Internals ----

    def _guard(self, sid: str, event: str) -> None:
        if event in _HOST_EVENTS:
            if self.enforce_host_role and sid not in self._hosts:
                raise SessionError('forbidden', 'Only the host can do that', event)
        elif sid not in self.registry:
            raise SessionError('not-a-player', 'Join the game before voting', event)
        if event not in _ALLOWED[self.phase]:
            raise SessionError('invalid-phase', f"Cannot {event} during {self.phase.value}", event)

    def _open_round(self, question, event: str) -> Outcome:
        if not isinstance(question, str) or not question.strip():
            raise SessionError('invalid-question', 'A question is required', event)
        self.phase = Phase.VOTING
        self.current_question = question.strip()
        self.ledger.clear()
        self.results = []
        self.logger.info(f"[round-start] question={self.current_question!r} players={self.registry.count()}")
        return Outcome().broadcast('game-started', {
            'question': self.current_question,
            'players': self.registry.to_list(),
        })
