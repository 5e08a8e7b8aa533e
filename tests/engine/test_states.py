"""Tests for the state registry and descriptor normalisation."""

import pytest

from automata.core.errors import InvalidConfigError
from automata.engine.states import State, StateDescriptor, StateKind, StateRegistry


def on(t):
    t.next("b")


def hook(h):
    pass


class TestStateDescriptorResolve:
    def test_bare_function(self):
        d = StateDescriptor.resolve("a", on)
        assert d.kind is StateKind.FUNCTION
        assert d.on is on
        assert d.enter is None and d.exit is None
        assert d.final is False

    def test_state_object(self):
        d = StateDescriptor.resolve("a", State(on=on, enter=hook, final=True))
        assert d.kind is StateKind.HOOKED
        assert d.on is on
        assert d.enter is hook
        assert d.final is True

    def test_mapping(self):
        d = StateDescriptor.resolve("a", {"exit": hook})
        assert d.kind is StateKind.HOOKED
        assert d.exit is hook
        assert d.on is None

    def test_final_marker(self):
        d = StateDescriptor.resolve("c", {"final": True})
        assert d.kind is StateKind.MARKER
        assert d.final is True

    def test_empty_mapping_is_marker(self):
        d = StateDescriptor.resolve("c", {})
        assert d.kind is StateKind.MARKER
        assert d.final is False

    def test_descriptor_passes_through(self):
        d = StateDescriptor(kind=StateKind.MARKER, final=True)
        assert StateDescriptor.resolve("x", d) is d

    def test_unknown_keys_rejected(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            StateDescriptor.resolve("a", {"next": "b"})
        assert exc_info.value.key == "states.a"

    def test_non_callable_hook_rejected(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            StateDescriptor.resolve("a", {"enter": "not callable"})
        assert exc_info.value.key == "states.a.enter"

    @pytest.mark.parametrize("declaration", [42, "b", None, ["on"]])
    def test_other_shapes_rejected(self, declaration):
        with pytest.raises(InvalidConfigError):
            StateDescriptor.resolve("a", declaration)


class TestStateRegistry:
    def test_mapping_protocol(self):
        registry = StateRegistry({"a": on, "b": {"final": True}})
        assert len(registry) == 2
        assert list(registry) == ["a", "b"]
        assert "a" in registry
        assert registry["b"].final is True

    def test_unknown_state_resolves_to_none(self):
        registry = StateRegistry({"a": on})
        assert registry.get("missing") is None
        assert registry.is_final("missing") is False

    def test_is_final(self):
        registry = StateRegistry({"a": on, "b": State(final=True)})
        assert registry.is_final("a") is False
        assert registry.is_final("b") is True

    def test_integer_state_ids(self):
        registry = StateRegistry({1: on, 2: {"final": True}})
        assert registry.is_final(2)

    def test_states_must_be_mapping(self):
        with pytest.raises(InvalidConfigError):
            StateRegistry([("a", on)])
