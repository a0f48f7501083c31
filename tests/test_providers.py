"""Tests for state providers."""

from __future__ import annotations

import json
from enum import Enum

import pytest

from statecycle import JsonFileStateProvider, StateBuilder, StateMachine
from statecycle.providers import InMemoryStateProvider, StateProvider, json_file
from statecycle.utils.atomic import AtomicWriteError


class Phase(Enum):
    DRAFT = 1
    REVIEW = 2
    PUBLISHED = 3


class TestInMemoryStateProvider:
    """Dict-backed provider."""

    def test_unknown_id_has_no_state(self) -> None:
        provider = InMemoryStateProvider()

        assert provider.get_current_state("x") is None
        assert not provider.is_state("x", "A")
        assert not provider.is_state_in("x", "A", "B")

    def test_set_and_query(self) -> None:
        provider = InMemoryStateProvider()
        provider.initialize_state("x", "A")
        provider.set_state("x", "B")

        assert provider.get_current_state("x") == "B"
        assert provider.is_state("x", "B")
        assert provider.is_state_in("x", "A", "B")
        assert not provider.is_state_in("x", "A")
        assert provider.ids() == ["x"]
        assert len(provider) == 1

    def test_remove_allows_restart(self) -> None:
        machine = StateMachine(StateBuilder().initialize("A"))
        machine.start("x")

        assert machine.state_provider.remove("x") == "A"
        assert machine.start("x") == "A"


class TestJsonFileStateProvider:
    """Provider persisting to a JSON file."""

    def test_states_survive_a_new_provider(self, tmp_path) -> None:
        path = tmp_path / "states.json"
        provider = JsonFileStateProvider(path)
        provider.initialize_state("order-1", "A")
        provider.set_state("order-2", "B")

        reloaded = JsonFileStateProvider(path)

        assert reloaded.get_current_state("order-1") == "A"
        assert reloaded.get_current_state("order-2") == "B"

    def test_file_layout(self, tmp_path) -> None:
        path = tmp_path / "nested" / "states.json"
        JsonFileStateProvider(path).set_state(42, "A")

        data = json.loads(path.read_text())
        assert data["states"] == {"42": "A"}
        assert "saved_at" in data

    def test_integer_ids_are_stored_as_strings(self, tmp_path) -> None:
        provider = JsonFileStateProvider(tmp_path / "states.json")
        provider.set_state(7, "A")

        assert provider.get_current_state(7) == "A"
        assert provider.get_current_state("7") == "A"

    def test_enum_states_with_codec(self, tmp_path) -> None:
        path = tmp_path / "states.json"
        provider = JsonFileStateProvider(path, encode=lambda s: s.name, decode=Phase.__getitem__)
        provider.set_state("doc", Phase.REVIEW)

        reloaded = JsonFileStateProvider(path, encode=lambda s: s.name, decode=Phase.__getitem__)

        assert reloaded.get_current_state("doc") is Phase.REVIEW
        assert json.loads(path.read_text())["states"] == {"doc": "REVIEW"}

    def test_enum_state_without_codec_is_rejected(self, tmp_path) -> None:
        path = tmp_path / "states.json"
        provider = JsonFileStateProvider(path)
        provider.set_state("doc", "DRAFT")

        with pytest.raises(TypeError):
            provider.set_state("doc", Phase.REVIEW)

        assert provider.get_current_state("doc") == "DRAFT"
        assert JsonFileStateProvider(path).get_current_state("doc") == "DRAFT"

    def test_failed_write_leaves_memory_unchanged(self, tmp_path, monkeypatch) -> None:
        provider = JsonFileStateProvider(tmp_path / "states.json")
        provider.set_state("a", "A")

        def broken_write(path, data, indent=2):
            raise AtomicWriteError("disk full")

        monkeypatch.setattr(json_file, "atomic_write_json", broken_write)

        with pytest.raises(AtomicWriteError):
            provider.set_state("a", "B")
        with pytest.raises(AtomicWriteError):
            provider.remove("a")

        assert provider.get_current_state("a") == "A"

    def test_no_temp_files_left_behind(self, tmp_path) -> None:
        provider = JsonFileStateProvider(tmp_path / "states.json")
        provider.set_state("a", "A")

        with pytest.raises(TypeError):
            provider.set_state("b", object())

        assert [p.name for p in tmp_path.iterdir()] == ["states.json"]

    def test_corrupt_file_starts_empty(self, tmp_path) -> None:
        path = tmp_path / "states.json"
        path.write_text("{not json")

        provider = JsonFileStateProvider(path)

        assert provider.get_current_state("x") is None

    def test_remove_and_clear(self, tmp_path) -> None:
        path = tmp_path / "states.json"
        provider = JsonFileStateProvider(path)
        provider.set_state("a", "A")
        provider.set_state("b", "B")

        assert provider.remove("a") == "A"
        assert JsonFileStateProvider(path).get_current_state("a") is None

        provider.clear()
        assert not path.exists()
        assert provider.get_current_state("b") is None

    def test_machine_resumes_from_file(self, tmp_path) -> None:
        path = tmp_path / "states.json"
        builder = (
            StateBuilder()
            .initialize(Phase.DRAFT)
            .action("submit", Phase.DRAFT, Phase.REVIEW)
            .action("publish", Phase.REVIEW, Phase.PUBLISHED)
        )

        def make_provider() -> StateProvider:
            return JsonFileStateProvider(path, encode=lambda s: s.name, decode=Phase.__getitem__)

        first = StateMachine(builder, make_provider())
        first.start("doc")
        first.post(Phase.REVIEW, "doc")

        second = StateMachine(builder, make_provider())
        second.post(Phase.PUBLISHED, "doc")

        assert second.get_current_state("doc") is Phase.PUBLISHED
