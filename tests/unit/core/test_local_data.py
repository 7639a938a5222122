"""
Unit tests for core.local_data module.

Tests:
- init() creating or loading the backing document
- load()/save() round trip and error mapping
- Key/name consistency of the registry map
- add/remove/enable registry
- refresh() isolating per-registry failures
- get_endpoints() / get_endpoints_filtered() across registries
- refresh_stats(), ping_all() and summary()
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from subrpc.core.exceptions import CorruptDataError, PersistenceError, RemoteFetchError
from subrpc.core.local_data import LocalData, RegistrySummary
from subrpc.core.registry import Registry
from subrpc.models import Endpoint, Filter
from subrpc.probe import ProbeResult


FETCH = "subrpc.core.registry.fetch_json"
PROBE = "subrpc.core.registry.probe_endpoint"


# =============================================================================
# Persistence
# =============================================================================


class TestInit:
    def test_creates_and_persists(self, data_file: Path):
        data = LocalData.init(data_file)

        assert data.file == data_file
        assert data.registries == {}
        assert data_file.exists()
        assert json.loads(data_file.read_text())["registries"] == {}

    def test_creates_parent_directories(self, tmp_path: Path):
        data_file = tmp_path / "nested" / "dir" / "data.json"
        LocalData.init(data_file)
        assert data_file.exists()

    def test_loads_existing(self, local_data: LocalData):
        local_data.save()

        data = LocalData.init(local_data.file)

        assert set(data.registries) == {"Test"}

    def test_force_overwrites(self, local_data: LocalData):
        local_data.save()

        data = LocalData.init(local_data.file, force=True)

        assert data.registries == {}
        assert LocalData.load(local_data.file).registries == {}

    def test_existing_corrupt_file(self, data_file: Path):
        data_file.write_text("garbage")
        with pytest.raises(CorruptDataError):
            LocalData.init(data_file)


class TestLoadSave:
    def test_round_trip(self, local_data: LocalData):
        registry = local_data.registries["Test"]
        registry.labels = ["community"]
        registry.attach_registry_labels()
        registry.rpc_endpoints["Polkadot"][0].stats.record(True, 0.2)
        local_data.save()

        loaded = LocalData.load(local_data.file)

        assert loaded.model_dump() == local_data.model_dump()
        parity = loaded.registries["Test"].rpc_endpoints["Polkadot"][0]
        assert parity.stats.latency == pytest.approx(0.4)
        assert parity.aliases == ["dot"]

    def test_document_shape(self, local_data: LocalData):
        local_data.save()
        document = json.loads(local_data.file.read_text())

        assert set(document) == {"file", "registries", "last_update"}
        assert document["file"] == str(local_data.file)
        assert document["registries"]["Test"]["name"] == "Test"

    def test_load_sets_file_to_path_read(self, local_data: LocalData, tmp_path: Path):
        local_data.save()
        moved = tmp_path / "moved.json"
        local_data.file.rename(moved)

        loaded = LocalData.load(moved)

        assert loaded.file == moved

    def test_save_leaves_no_temp_files(self, local_data: LocalData):
        local_data.save()
        local_data.save()
        assert [p.name for p in local_data.file.parent.iterdir()] == ["data.json"]

    def test_load_missing(self, data_file: Path):
        with pytest.raises(CorruptDataError, match="Cannot read"):
            LocalData.load(data_file)

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "{not json",
            "[]",
            '{"registries": {}}',
            '{"file": "x", "registries": {"A": {"name": "A", "rpc_endpoints": '
            '{"c": [{"name": "e", "url": "gopher://e"}]}}}}',
        ],
    )
    def test_load_invalid(self, data_file: Path, content: str):
        data_file.write_text(content)
        with pytest.raises(CorruptDataError, match="Invalid local data"):
            LocalData.load(data_file)

    def test_load_rejects_key_name_mismatch(self, data_file: Path):
        data_file.write_text(
            json.dumps({"file": str(data_file), "registries": {"A": {"name": "B"}}})
        )
        with pytest.raises(CorruptDataError, match="named 'B'"):
            LocalData.load(data_file)

    def test_save_failure(self, local_data: LocalData, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        local_data.file = blocker / "data.json"

        with pytest.raises(PersistenceError, match="Cannot write"):
            local_data.save()


# =============================================================================
# Registry Management
# =============================================================================


class TestRegistryManagement:
    def test_add_keys_by_name(self, data_file: Path):
        data = LocalData(file=data_file).add_registry(Registry(name="A"))
        assert list(data.registries) == ["A"]

    def test_add_overwrites_namesake(self, local_data: LocalData):
        replacement = Registry(name="Test", url="https://example.org/new.json")
        local_data.add_registry(replacement)

        assert len(local_data.registries) == 1
        assert local_data.registries["Test"] is replacement

    def test_remove(self, local_data: LocalData):
        removed = local_data.remove_registry("Test")
        assert removed.name == "Test"
        assert local_data.registries == {}

    def test_remove_unknown(self, local_data: LocalData):
        with pytest.raises(KeyError):
            local_data.remove_registry("missing")

    def test_enable_toggle(self, local_data: LocalData):
        local_data.enable_registry("Test", False)
        assert local_data.registries["Test"].enabled is False
        assert local_data.enabled_registries() == []

        local_data.enable_registry("Test")
        assert local_data.registries["Test"].enabled is True

    def test_enable_unknown(self, local_data: LocalData):
        with pytest.raises(KeyError):
            local_data.enable_registry("missing", True)


# =============================================================================
# Refresh
# =============================================================================


def _nested_document() -> Any:
    depth = 100_000
    return json.loads("[" * depth + "]" * depth)


def _raise(exc: BaseException) -> Any:
    raise exc


class TestRefresh:
    @pytest.mark.parametrize(
        "fail",
        [
            lambda: _raise(TimeoutError()),
            lambda: _raise(RuntimeError("boom")),
            _nested_document,
        ],
        ids=["timeout", "unexpected", "nested_json"],
    )
    async def test_isolates_failures(
        self, data_file: Path, registry_document: dict[str, Any], fail: Any
    ):
        failing = Registry(name="Failing", url="https://down.example.org/reg.json")
        failing.add_endpoint("Polkadot", Endpoint(name="kept", url="wss://kept.io"))
        working = Registry(name="Working", url="https://up.example.org/reg.json")
        data = LocalData(file=data_file).add_registry(failing).add_registry(working)

        async def fake_fetch(url: str, **kwargs: Any) -> dict[str, Any]:
            if "down" in url:
                return fail()
            return registry_document

        with patch(FETCH, side_effect=fake_fetch):
            result = await data.refresh()

        assert result is data
        assert data.last_update is not None
        assert [e.name for _, e in failing.iter_endpoints()] == ["kept"]
        assert failing.last_update is None
        assert working.get_chains() == {"Polkadot", "Kusama"}
        assert working.last_update is not None

    async def test_logs_failures(self, local_data: LocalData, caplog):
        local_data.add_registry(Registry(name="Down", url="https://down.example.org/reg.json"))

        with patch(FETCH, new_callable=AsyncMock, side_effect=RemoteFetchError("x")):
            await local_data.refresh()

        failures = [r for r in caplog.records if r.getMessage() == "registry_update_failed"]
        assert len(failures) == 1
        assert failures[0].structured_kv["name"] == "Down"

    async def test_stamps_last_update_without_remotes(self, local_data: LocalData):
        await local_data.refresh()
        assert local_data.last_update is not None

    async def test_refresh_stats_enabled_only(self, local_data: LocalData):
        disabled = Registry(name="Off", enabled=False)
        disabled.add_endpoint("Polkadot", Endpoint(name="off", url="wss://off.io"))
        local_data.add_registry(disabled)

        probe = AsyncMock(return_value=ProbeResult(True, 0.1))
        with patch(PROBE, probe):
            await local_data.refresh_stats()

        assert probe.await_count == 2
        assert disabled.rpc_endpoints["Polkadot"][0].stats.success == 0
        for endpoint in local_data.get_endpoints():
            assert endpoint.stats.success == 1

    async def test_ping_all(self, local_data: LocalData):
        with patch(PROBE, new_callable=AsyncMock, return_value=ProbeResult.failed()):
            reports = await local_data.ping_all()

        assert list(reports) == ["Test"]
        assert len(reports["Test"]) == 2
        assert all(e.stats.failures == 0 for e in local_data.get_endpoints())


# =============================================================================
# Queries
# =============================================================================


class TestGetEndpoints:
    def test_chain_case_insensitive(self, local_data: LocalData):
        endpoints = local_data.get_endpoints("polkadot")
        assert {e.name for e in endpoints} == {"Parity", "OnFinality"}

    def test_unknown_chain_is_empty(self, local_data: LocalData):
        assert local_data.get_endpoints("Kusama") == []

    def test_all_chains(self, local_data: LocalData):
        local_data.add_registry(Registry.default())
        assert len(local_data.get_endpoints()) == 5

    def test_no_cross_registry_dedup(self, local_data: LocalData, test_registry: Registry):
        copied = test_registry.model_copy(deep=True)
        twin = Registry(name="Twin", rpc_endpoints=copied.rpc_endpoints)
        local_data.add_registry(twin)
        assert len(local_data.get_endpoints("Polkadot")) == 4

    def test_disabled_registries_skipped(self, local_data: LocalData):
        local_data.enable_registry("Test", False)
        assert local_data.get_endpoints("Polkadot") == []

    def test_filtered(self, local_data: LocalData):
        local_data.add_registry(Registry.default())
        f = Filter().with_chain("Polkadot").with_includes(["Parity"])

        endpoints = local_data.get_endpoints_filtered(f)

        assert [e.name for e in endpoints] == ["Parity", "Parity"]

    def test_filtered_none(self, local_data: LocalData):
        assert len(local_data.get_endpoints_filtered()) == 2


class TestSummary:
    def test_rows(self, local_data: LocalData):
        local_data.add_registry(Registry(name="Off", url="https://x.io/r.json", enabled=False))

        assert local_data.summary() == [
            RegistrySummary("Test", True, None, 1, 2, None),
            RegistrySummary("Off", False, "https://x.io/r.json", 0, 0, None),
        ]

    def test_to_dict_is_json_ready(self, local_data: LocalData):
        json.dumps(local_data.to_dict())
