from typing import Dict, Iterable, List, Optional, Tuple

from partyvote.models import Participant, ResultEntry, Vote


class VoteLedger:
    """At most one vote per voter for the current round.

    The ledger does not know who is connected: it stores any target id and
    leaves target validation and self-vote rules to its callers.
    """

    def __init__(self) -> None:
        self._votes: Dict[str, Vote] = {}

    def record_vote(self, voter_id: str, target_id: str, total_participants: int) -> Optional[Tuple[int, int]]:
        """Store the vote and return ``(votes_cast, total_participants)``.

        Returns None, storing nothing, when the voter already voted this round.
        """
        if voter_id in self._votes:
            return None
        self._votes[voter_id] = Vote(voter_id=voter_id, target_id=target_id)
        return len(self._votes), total_participants

    def has_voted(self, voter_id: str) -> bool:
        return voter_id in self._votes

    def purge(self, participant_id: str) -> int:
        """Drop votes cast by or for ``participant_id``; returns how many went."""
        doomed = [
            voter for voter, vote in self._votes.items()
            if voter == participant_id or vote.target_id == participant_id
        ]
        for voter in doomed:
            del self._votes[voter]
        return len(doomed)

    def tally(self, participants: Iterable[Participant]) -> List[ResultEntry]:
        """Rank participants by votes received, most first.

        Participants with no votes score zero. ``sorted`` is stable, so ties
        keep registry (join) order and the first entry is the winner.
        """
        entries = [ResultEntry(participant_id=p.id, name=p.name) for p in participants]
        by_id = {entry.participant_id: entry for entry in entries}
        for vote in self._votes.values():
            entry = by_id.get(vote.target_id)
            if entry is not None:
                entry.vote_count += 1
        return sorted(entries, key=lambda e: e.vote_count, reverse=True)

    def clear(self) -> None:
        self._votes.clear()

    def votes(self) -> List[Vote]:
        return list(self._votes.values())

    def __len__(self) -> int:
        return len(self._votes)
