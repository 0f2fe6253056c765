import pytest

from hostnamer.engine.audit import AuditLogger
from hostnamer.engine.catalog import DuplicateCodeError, DuplicateNameError
from hostnamer.engine.generator import HostnameGenerator, UnknownCategoryError, ValidationError
from hostnamer.engine.store import MemorySnapshotStore
from hostnamer.models import NamingScheme, Snapshot


def small_scheme():
    return NamingScheme(
        vendors={"Vendor1": "1"},
        types={"laptop": "L"},
        sectors={"ti": "01"},
        locations={"fabrica": "1"},
    )


def test_generates_expected_hostnames_on_empty_bucket():
    gen = HostnameGenerator(scheme=small_scheme())
    batch = gen.generate("Vendor1", "laptop", "ti", "fabrica", 2)
    assert [h.hostname for h in batch] == ["CNL-1L011-001", "CNL-1L011-002"]
    assert [h.index_in_batch for h in batch] == [1, 2]
    assert [h.number for h in batch] == [1, 2]
    assert batch[0].vendor == "vendor1"
    assert batch[0].created_at


def test_default_catalogs():
    gen = HostnameGenerator()
    assert gen.vendors() == ["condor", "volker", "vivo", "sellbetti"]
    assert "celular" in gen.types()
    assert gen.sectors() == ["ti", "rh", "financeiro"]
    assert gen.locations() == ["fabrica", "escritorio", "deposito"]
    batch = gen.generate("Volker", "desktop", "rh", "escritorio")
    assert batch[0].hostname == "CNL-3D022-001"


def test_numbering_is_scoped_per_sector_only():
    gen = HostnameGenerator()
    gen.generate("Condor", "laptop", "ti", "fabrica", 2)
    other = gen.generate("Vivo", "servidor", "ti", "deposito", 1)
    assert other[0].number == 3
    assert gen.generate("Vivo", "servidor", "rh", "deposito")[0].number == 1


def test_batch_fills_gaps_and_grows_bucket():
    snap = Snapshot(allocations={"ti": {"001": "CNL-1L011-001", "003": "CNL-1L011-003"}})
    gen = HostnameGenerator(snapshot=snap)
    before = set(gen.allocated_numbers("ti"))
    batch = gen.generate("Condor", "laptop", "ti", "fabrica", 3)
    numbers = [h.number for h in batch]
    assert numbers == [2, 4, 5]
    assert not before & set(numbers)
    assert set(gen.allocated_numbers("ti")) == before | set(numbers)


def test_get_next_available():
    gen = HostnameGenerator()
    assert gen.get_next_available("ti") == 1
    assert gen.get_next_available("unseen") == 1
    gen.generate("Condor", "laptop", "ti", "fabrica", 2)
    assert gen.get_next_available("ti") == 3
    assert gen.get_next_available("TI") == 3
    assert gen.get_next_available("ti") == 3


def test_wide_sequence_numbers_are_not_truncated():
    existing = {f"{n:03d}": f"h{n}" for n in range(1, 1000)}
    gen = HostnameGenerator(snapshot=Snapshot(allocations={"ti": existing}))
    batch = gen.generate("Condor", "laptop", "ti", "fabrica")
    assert batch[0].hostname == "CNL-1L011-1000"
    assert gen.decode(batch[0].hostname).number == 1000


@pytest.mark.parametrize(
    "args",
    [
        ("", "laptop", "ti", "fabrica", 1),
        ("Condor", None, "ti", "fabrica", 1),
        ("Condor", "laptop", "", "fabrica", 1),
        ("Condor", "laptop", "ti", "", 1),
        ("Condor", "laptop", "ti", "fabrica", 0),
        ("Condor", "laptop", "ti", "fabrica", -2),
    ],
)
def test_generate_rejects_missing_fields_and_bad_count(args):
    gen = HostnameGenerator()
    with pytest.raises(ValidationError):
        gen.generate(*args)
    assert gen.snapshot().allocations == {}


def test_unknown_category_value_is_rejected_without_partial_batch():
    gen = HostnameGenerator()
    with pytest.raises(UnknownCategoryError):
        gen.generate("Condor", "laptop", "ti", "marte", 2)
    assert gen.get_next_available("ti") == 1
    assert gen.snapshot().allocations == {}


def test_decode_round_trip():
    gen = HostnameGenerator()
    for item in gen.generate("Sellbetti", "impressora", "financeiro", "deposito", 2):
        decoded = gen.decode(item.hostname)
        assert decoded is not None
        assert decoded.vendor == "sellbetti"
        assert decoded.type == "impressora"
        assert decoded.sector == "financeiro"
        assert decoded.location == "deposito"
        assert decoded.number == item.number
        assert decoded.codes == {"vendor": "2", "type": "I", "sector": "03", "location": "4"}


def test_decode_rejects_bad_format():
    gen = HostnameGenerator()
    assert gen.decode("web-01") is None
    assert gen.decode("CNL-1l011-001") is None
    assert gen.decode("CNL-1L011-01") is None
    assert gen.decode("XYZ-1L011-001") is None
    assert gen.validate_format("CNL-1L011-001") is True
    assert gen.validate_format(None) is False


def test_decode_unknown_code_yields_none_name():
    gen = HostnameGenerator()
    decoded = gen.decode("CNL-9L011-004")
    assert decoded.vendor is None
    assert decoded.type == "laptop"
    assert decoded.codes["vendor"] == "9"


def test_decode_two_character_vendor_code():
    gen = HostnameGenerator()
    gen.add_vendor("Acme", "A7")
    batch = gen.generate("acme", "celular", "rh", "fabrica")
    assert batch[0].hostname == "CNL-A7C021-001"
    assert gen.decode(batch[0].hostname).vendor == "acme"


def test_add_vendor_duplicate_name_and_code():
    gen = HostnameGenerator()
    with pytest.raises(DuplicateNameError):
        gen.add_vendor("CONDOR", "9")
    with pytest.raises(DuplicateCodeError):
        gen.add_vendor("Acme", "5")
    assert gen.vendors() == ["condor", "volker", "vivo", "sellbetti"]


def test_add_each_category():
    gen = HostnameGenerator()
    gen.add_type("Tablet", "T")
    gen.add_sector("Logistica", "04")
    gen.add_location("Loja", "5")
    batch = gen.generate("Condor", "tablet", "LOGISTICA", "loja")
    assert batch[0].hostname == "CNL-1T045-001"


def test_remove_item_does_not_touch_allocations():
    gen = HostnameGenerator()
    gen.generate("Condor", "laptop", "ti", "fabrica")
    assert gen.remove_item("vendors", "Condor") is True
    assert gen.remove_item("vendor", "condor") is False
    assert gen.remove_item("planets", "condor") is False
    assert "condor" not in gen.vendors()
    assert gen.snapshot().allocations == {"ti": {"001": "CNL-1L011-001"}}
    assert gen.decode("CNL-1L011-001").vendor is None


def test_snapshot_holds_only_additions():
    gen = HostnameGenerator()
    gen.add_vendor("Acme", "7")
    gen.generate("acme", "laptop", "rh", "fabrica")
    snap = gen.snapshot()
    assert snap.vendors == {"acme": "7"}
    assert snap.types == {}
    assert snap.allocations == {"rh": {"001": "CNL-7L022-001"}}


def test_restore_merges_without_overwriting_defaults():
    saved = {
        "fornecedores": {"Condor": "9", "acme": "7"},
        "tipos": {"tablet": "T"},
        "maquinas": {"ti": {"001": "CNL-1L011-001"}},
    }
    gen = HostnameGenerator(snapshot=saved)
    assert gen.catalog("vendor").code_for("condor") == "1"
    assert gen.catalog("vendor").code_for("acme") == "7"
    assert "tablet" in gen.types()
    assert gen.get_next_available("ti") == 2


def test_store_is_loaded_and_saved_on_mutation():
    store = MemorySnapshotStore(Snapshot(vendors={"acme": "7"}))
    gen = HostnameGenerator(store=store)
    assert "acme" in gen.vendors()

    gen.add_location("Loja", "5")
    gen.generate("acme", "laptop", "ti", "loja")
    assert store.saves == 2
    assert store.snapshot.locations == {"loja": "5"}
    assert store.snapshot.allocations == {"ti": {"001": "CNL-7L015-001"}}

    reloaded = HostnameGenerator(store=store)
    assert reloaded.get_next_available("ti") == 2


def test_failed_mutation_does_not_save():
    store = MemorySnapshotStore()
    gen = HostnameGenerator(store=store)
    with pytest.raises(DuplicateCodeError):
        gen.add_sector("compras", "01")
    with pytest.raises(ValidationError):
        gen.generate("Condor", "laptop", "ti", "fabrica", 0)
    assert store.saves == 0


def test_mutations_are_audited(tmp_path):
    audit = AuditLogger(tmp_path / "audit.jsonl")
    gen = HostnameGenerator(audit=audit)
    gen.generate("Condor", "laptop", "ti", "fabrica", 2)
    gen.add_vendor("Acme", "7")
    gen.remove_item("vendor", "acme")

    records = audit.read()
    assert [r["action"] for r in records] == ["generate", "add", "remove"]
    assert records[0]["hostnames"] == ["CNL-1L011-001", "CNL-1L011-002"]
    assert records[0]["sector"] == "ti"
    assert records[1]["detail"] == "acme=7"


def test_sector_summary():
    gen = HostnameGenerator()
    gen.generate("Condor", "laptop", "ti", "fabrica", 2)
    gen.generate("Vivo", "desktop", "rh", "fabrica")
    summary = gen.sector_summary()
    assert set(summary) == {"ti", "rh"}
    assert summary["ti"].code == "01"
    assert summary["ti"].count == 2
    assert summary["rh"].hostnames == ("CNL-5D021-001",)


def test_custom_prefix():
    scheme = small_scheme().model_copy(update={"prefix": "ACME"})
    gen = HostnameGenerator(scheme=scheme)
    hostname = gen.generate("vendor1", "laptop", "ti", "fabrica")[0].hostname
    assert hostname == "ACME-1L011-001"
    assert gen.decode(hostname).vendor == "vendor1"
    assert gen.decode("CNL-1L011-001") is None


class FailingStore(MemorySnapshotStore):
    def save(self, snapshot):
        raise OSError("disk full")


def test_failed_save_releases_generated_numbers():
    gen = HostnameGenerator(store=FailingStore())
    with pytest.raises(OSError):
        gen.generate("Condor", "laptop", "ti", "fabrica", 2)
    assert gen.allocated_numbers("ti") == []
    assert gen.get_next_available("ti") == 1


def test_failed_save_keeps_earlier_allocations():
    snap = Snapshot(allocations={"ti": {"001": "CNL-1L011-001"}})
    gen = HostnameGenerator(snapshot=snap, store=FailingStore())
    with pytest.raises(OSError):
        gen.generate("Condor", "laptop", "ti", "fabrica", 2)
    assert gen.snapshot().allocations == {"ti": {"001": "CNL-1L011-001"}}


def test_failed_save_leaves_catalogs_unchanged():
    gen = HostnameGenerator(store=FailingStore())
    with pytest.raises(OSError):
        gen.add_vendor("Acme", "7")
    assert "acme" not in gen.vendors()
    assert gen.catalog("vendor").name_for("7") is None

    with pytest.raises(OSError):
        gen.remove_item("type", "laptop")
    assert gen.catalog("type").code_for("laptop") == "L"
    assert gen.catalog("type").name_for("L") == "laptop"


def test_format_requires_ascii_digits():
    gen = HostnameGenerator()
    hostname = "CNL-1L٠١1-٠٠٧"
    assert gen.validate_format(hostname) is False
    assert gen.decode(hostname) is None
    assert gen.validate_format("CNL-1L011-007") is True
