"""Tests for snapshot serialization and the snapshot repository."""

from uuid import uuid4

import pytest

from venture_sim.core.commands import CreateBusiness, LoadState, ResolveDecision, Tick
from venture_sim.core.entities import BusinessType, FundingStage, GameState
from venture_sim.persistence import GameStateSerializer, InMemorySnapshotRepository
from venture_sim.store import GameStateStore


@pytest.fixture
def played(store):
    """A store with a business, a resolved decision and six months of history."""
    store.dispatch(CreateBusiness(
        name="Snapshot Inc",
        business_type=BusinessType.ECOMMERCE,
        funding_stage=FundingStage.SEED
    ))
    decision = store.state.decisions[0]
    store.dispatch(ResolveDecision(decision.id, 1))
    store.dispatch(Tick(elapsed_ticks=6))
    return store


def test_round_trip(played):
    serializer = GameStateSerializer()
    state = played.state

    restored = serializer.loads(serializer.dumps(state))

    assert restored == state
    assert isinstance(restored.decisions, tuple)
    assert restored.business.business_type == BusinessType.ECOMMERCE


def test_to_dict_uses_json_values(played):
    data = GameStateSerializer().to_dict(played.state)

    assert data["business"]["business_type"] == "ecommerce"
    assert data["business"]["funding_stage"] == "seed"
    assert isinstance(data["business"]["id"], str)


def test_load_into_fresh_store(played, settings):
    repository = InMemorySnapshotRepository()
    repository.save(played.state)

    fresh = GameStateStore(settings)
    snapshot = repository.load(played.state.business.id)
    result = fresh.dispatch(LoadState(snapshot))

    assert result.ok
    assert result.state.business == played.state.business
    assert result.state.financials == played.state.financials
    assert result.state.decision_history == played.state.decision_history
    assert result.state.metrics == played.state.metrics


def test_loaded_session_continues_like_saved_one(played, settings):
    """Test that a reloaded session replays the same future."""
    serializer = GameStateSerializer()
    fresh = GameStateStore(settings)
    fresh.dispatch(LoadState(serializer.loads(serializer.dumps(played.state))))

    continued = played.dispatch(Tick(elapsed_ticks=3)).state
    resumed = fresh.dispatch(Tick(elapsed_ticks=3)).state

    assert resumed.business == continued.business
    assert resumed.events == continued.events
    assert resumed.decisions == continued.decisions


def test_repository_operations(played):
    repository = InMemorySnapshotRepository()
    business_id = played.state.business.id

    assert repository.load(business_id) is None

    repository.save(played.state)
    assert repository.list_ids() == [business_id]
    assert repository.load(business_id) == played.state

    assert repository.delete(business_id)
    assert not repository.delete(business_id)
    assert repository.load(uuid4()) is None


def test_repository_requires_business():
    with pytest.raises(ValueError):
        InMemorySnapshotRepository().save(GameState())
