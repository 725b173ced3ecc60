"""
Game state persistence.

Snapshots are serialized to JSON with a pydantic TypeAdapter over the
GameState dataclasses. A repository never mutates a live store: a loaded
snapshot re-enters through the LoadState command.

    repository.save(serializer.dumps(store.state))
    store.dispatch(LoadState(serializer.loads(data)))
"""

from typing import Optional, Protocol
from uuid import UUID
import logging

from pydantic import TypeAdapter

from .core.entities import GameState

logger = logging.getLogger(__name__)


class GameStateSerializer:
    """JSON round-tripping for GameState snapshots."""

    def __init__(self):
        self._adapter = TypeAdapter(GameState)

    def dumps(self, state: GameState) -> str:
        return self._adapter.dump_json(state).decode("utf-8")

    def loads(self, data: str | bytes) -> GameState:
        return self._adapter.validate_json(data)

    def to_dict(self, state: GameState) -> dict:
        return self._adapter.dump_python(state, mode="json")


class SnapshotRepository(Protocol):
    """Storage for serialized snapshots, keyed by business id."""

    def save(self, state: GameState) -> None:
        ...

    def load(self, business_id: UUID) -> Optional[GameState]:
        ...

    def delete(self, business_id: UUID) -> bool:
        ...


class InMemorySnapshotRepository:
    """
    In-memory SnapshotRepository.

    Stores the JSON form, so a load always returns a fresh GameState.
    """

    def __init__(self, serializer: GameStateSerializer = None):
        self.serializer = serializer or GameStateSerializer()
        self._snapshots: dict[UUID, str] = {}

    def save(self, state: GameState) -> None:
        if state.business is None:
            raise ValueError("Cannot save a snapshot without a business")
        self._snapshots[state.business.id] = self.serializer.dumps(state)
        logger.debug("Saved snapshot for business %s", state.business.id)

    def load(self, business_id: UUID) -> Optional[GameState]:
        data = self._snapshots.get(business_id)
        if data is None:
            return None
        return self.serializer.loads(data)

    def delete(self, business_id: UUID) -> bool:
        return self._snapshots.pop(business_id, None) is not None

    def list_ids(self) -> list[UUID]:
        return list(self._snapshots)
