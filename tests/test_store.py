import json
from pathlib import Path

from hostnamer.engine.generator import HostnameGenerator
from hostnamer.engine.store import FileSnapshotStore
from hostnamer.models import Snapshot


def test_missing_file_loads_nothing(tmp_path: Path):
    store = FileSnapshotStore(tmp_path / "state.json")
    assert store.load() is None
    assert store.last_error is None


def test_save_then_load(tmp_path: Path):
    path = tmp_path / "nested" / "state.json"
    store = FileSnapshotStore(path)
    store.save(Snapshot(vendors={"acme": "7"}, allocations={"ti": {"001": "CNL-1L011-001"}}))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert set(raw) == {"vendors", "types", "sectors", "locations", "allocations"}

    loaded = store.load()
    assert loaded.vendors == {"acme": "7"}
    assert loaded.allocations == {"ti": {"001": "CNL-1L011-001"}}


def test_legacy_portuguese_keys_are_accepted(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps({"setores": {"compras": "04"}, "locais": {}, "maquinas": {"compras": {"001": "x"}}}),
        encoding="utf-8",
    )
    loaded = FileSnapshotStore(path).load()
    assert loaded.sectors == {"compras": "04"}
    assert loaded.allocations == {"compras": {"001": "x"}}


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    store = FileSnapshotStore(path)

    gen = HostnameGenerator(store=store)
    assert store.last_error is not None
    assert gen.vendors() == ["condor", "volker", "vivo", "sellbetti"]
    assert gen.get_next_available("ti") == 1


def test_schema_invalid_file_falls_back(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"vendors": ["not", "a", "mapping"]}), encoding="utf-8")
    store = FileSnapshotStore(path)
    assert store.load() is None
    assert store.last_error.startswith("ValidationError")


def test_generator_persists_through_file(tmp_path: Path):
    path = tmp_path / "state.json"
    gen = HostnameGenerator(store=FileSnapshotStore(path))
    gen.add_vendor("Acme", "7")
    gen.generate("acme", "laptop", "ti", "fabrica", 2)

    again = HostnameGenerator(store=FileSnapshotStore(path))
    assert "acme" in again.vendors()
    assert again.generate("acme", "laptop", "ti", "fabrica")[0].hostname == "CNL-7L011-003"
