"""
Unit tests for MonsterFactionRegistry.

Tests name interning, dense id assignment, fail-soft lookups, handles and
the process-wide default registry.
"""

import pytest

from monfactions.factions import (
    UNSET_FACTION,
    FactionHandle,
    MonsterFactionRegistry,
    get_faction_registry,
    get_or_add_faction,
    reset_faction_registry,
)
from monfactions.observability import DiagnosticKind, DiagnosticLog


# =============================================================================
# REGISTRATION
# =============================================================================


class TestGetOrAdd:
    """Tests for interning faction names."""

    def test_ids_are_dense_in_registration_order(self, registry):
        """Distinct names get ids 0..k-1 in first-registration order."""
        names = ["zombie", "human", "animal", "fungus"]

        ids = [registry.get_or_add(name) for name in names]

        assert ids == [0, 1, 2, 3]
        assert registry.names() == names

    def test_repeated_name_returns_same_id(self, registry):
        """Registering a name twice does not grow the registry."""
        first = registry.get_or_add("zombie")
        registry.get_or_add("human")
        second = registry.get_or_add("zombie")

        assert first == second == 0
        assert len(registry) == 2

    def test_interleaved_repeats_keep_first_ids(self, registry):
        """Only the first mention of a name assigns its id."""
        sequence = ["a", "b", "a", "c", "b", "d", "a"]

        ids = [registry.get_or_add(name) for name in sequence]

        assert ids == [0, 1, 0, 2, 1, 3, 0]
        assert len(registry) == 4

    def test_new_faction_is_a_stub(self, registry):
        """A new entry has no parent and no attitudes."""
        faction = registry.obj(registry.get_or_add("ghoul"))

        assert faction.name == "ghoul"
        assert faction.id == 0
        assert faction.base_faction == UNSET_FACTION
        assert not faction.has_parent
        assert dict(faction.attitude_map) == {}

    def test_empty_string_is_a_legal_name(self, registry):
        """The registry itself places no restriction on names."""
        faction_id = registry.get_or_add("")

        assert registry.is_valid("")
        assert registry.obj(faction_id).name == ""


# =============================================================================
# LOOKUP
# =============================================================================


class TestLookup:
    """Tests for id and name lookups."""

    def test_round_trip_name_and_id(self, registry):
        """id_of(obj(i).name) == i for every valid id."""
        for name in ["monster", "human", "zombie", "bee"]:
            registry.get_or_add(name)

        for faction_id in range(len(registry)):
            assert registry.id_of(registry.obj(faction_id).name) == faction_id

    def test_obj_out_of_range_returns_first_faction(self, registry, diagnostics):
        """An invalid id reports a diagnostic and resolves to faction 0."""
        registry.get_or_add("monster")
        registry.get_or_add("human")

        faction = registry.obj(17)

        assert faction.id == 0
        assert diagnostics.count(DiagnosticKind.INVALID_INT_ID) == 1
        assert "17" in diagnostics.get_events()[0].message

    def test_obj_negative_id_returns_first_faction(self, registry, diagnostics):
        """UNSET and other negative ids are invalid."""
        registry.get_or_add("monster")

        assert registry.obj(UNSET_FACTION).name == "monster"
        assert diagnostics.count(DiagnosticKind.INVALID_INT_ID) == 1

    def test_obj_on_empty_registry_raises(self, registry):
        """With nothing registered there is no faction 0 to fall back to."""
        with pytest.raises(IndexError):
            registry.obj(0)

    def test_id_of_unknown_name(self, registry, diagnostics):
        """An unknown name reports a diagnostic and returns 0."""
        registry.get_or_add("monster")

        assert registry.id_of("dragon") == 0
        events = diagnostics.get_events(DiagnosticKind.INVALID_STRING_ID)
        assert len(events) == 1
        assert events[0].context["name"] == "dragon"

    def test_id_of_does_not_register(self, registry):
        """Lookups never grow the registry."""
        registry.get_or_add("monster")
        registry.id_of("dragon")

        assert len(registry) == 1
        assert not registry.is_valid("dragon")

    def test_is_valid_and_contains(self, registry):
        """Membership is by name."""
        registry.get_or_add("zombie")

        assert registry.is_valid("zombie")
        assert "zombie" in registry
        assert not registry.is_valid("human")
        assert "human" not in registry

    def test_iteration_is_in_id_order(self, registry):
        """Iterating yields records ordered by id."""
        for name in ["c", "a", "b"]:
            registry.get_or_add(name)

        assert [f.id for f in registry] == [0, 1, 2]
        assert [f.name for f in registry] == ["c", "a", "b"]


# =============================================================================
# HANDLES
# =============================================================================


class TestHandles:
    """Tests for generation-checked handles."""

    def test_handle_resolves_in_current_generation(self, registry):
        handle = registry.handle("zombie")

        assert handle == FactionHandle(id=0, generation=registry.generation)
        assert registry.obj(handle).name == "zombie"
        assert registry.is_valid_id(handle)

    def test_handle_goes_stale_after_reset(self, registry, diagnostics):
        """A handle from before a reset no longer validates."""
        handle = registry.handle("zombie")
        registry.reset()
        registry.get_or_add("human")

        assert not registry.is_valid_id(handle)
        assert registry.obj(handle).name == "human"
        assert diagnostics.count(DiagnosticKind.INVALID_INT_ID) == 1

    def test_reset_clears_factions(self, registry):
        registry.get_or_add("zombie")
        generation = registry.generation

        registry.reset()

        assert len(registry) == 0
        assert registry.generation == generation + 1
        assert not registry.is_finalized

    def test_is_valid_id_for_ints(self, registry):
        registry.get_or_add("zombie")

        assert registry.is_valid_id(0)
        assert not registry.is_valid_id(1)
        assert not registry.is_valid_id(UNSET_FACTION)


# =============================================================================
# INDEPENDENT AND DEFAULT REGISTRIES
# =============================================================================


class TestRegistryIsolation:
    """Tests that registries do not share state."""

    def test_independent_registries(self):
        """Two registries intern names separately."""
        first = MonsterFactionRegistry(diagnostics=DiagnosticLog())
        second = MonsterFactionRegistry(diagnostics=DiagnosticLog())

        first.get_or_add("zombie")
        first.get_or_add("human")
        second.get_or_add("human")

        assert first.id_of("human") == 1
        assert second.id_of("human") == 0
        assert "zombie" not in second

    def test_default_registry_is_shared(self):
        """Module-level helpers operate on one process-wide registry."""
        faction_id = get_or_add_faction("zombie")

        assert get_faction_registry().id_of("zombie") == faction_id
        assert get_faction_registry() is get_faction_registry()

    def test_reset_default_registry(self):
        """Resetting replaces the default registry."""
        before = get_faction_registry()
        get_or_add_faction("zombie")

        reset_faction_registry()

        after = get_faction_registry()
        assert after is not before
        assert len(after) == 0

    def test_to_dict_dump(self, registry):
        registry.get_or_add("zombie")

        dump = registry.to_dict()

        assert dump["finalized"] is False
        assert dump["factions"] == [
            {"name": "zombie", "id": 0, "base_faction": UNSET_FACTION, "attitude_map": {}}
        ]
