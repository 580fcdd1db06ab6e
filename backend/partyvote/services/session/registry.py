from typing import Dict, List, Optional

from partyvote.models import Participant


class ParticipantRegistry:
    """Connected players in arrival order, keyed by connection id.

    The host display is never registered here.
    """

    def __init__(self, max_name_length: int = 20) -> None:
        self.max_name_length = max_name_length
        self._participants: Dict[str, Participant] = {}

    def add_participant(self, participant_id: str, name) -> Optional[Participant]:
        """Register a player. Returns None when the name is unusable or the
        connection is already registered."""
        if not isinstance(name, str):
            return None
        name = name.strip()
        if not name or len(name) > self.max_name_length:
            return None
        if participant_id in self._participants:
            return None
        participant = Participant(id=participant_id, name=name)
        self._participants[participant_id] = participant
        return participant

    def remove_participant(self, participant_id: str) -> Optional[Participant]:
        # Unknown ids (the host, a socket that never joined) are a no-op
        return self._participants.pop(participant_id, None)

    def get(self, participant_id: str) -> Optional[Participant]:
        return self._participants.get(participant_id)

    def __contains__(self, participant_id) -> bool:
        return participant_id in self._participants

    def count(self) -> int:
        return len(self._participants)

    def list(self) -> List[Participant]:
        return list(self._participants.values())

    def to_list(self) -> List[dict]:
        return [p.to_dict() for p in self._participants.values()]
