from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from hostnamer.engine.allocation import AllocationTable
from hostnamer.engine.audit import AuditLogEntry, AuditLogger
from hostnamer.engine.catalog import CategoryCatalog, normalize_name
from hostnamer.engine.store import SnapshotStore
from hostnamer.models import NamingScheme, Snapshot


class ValidationError(ValueError):
    pass


class UnknownCategoryError(ValidationError):
    pass


CATEGORIES = ("vendor", "type", "sector", "location")

_CATEGORY_ALIASES = {
    "vendor": "vendor", "vendors": "vendor", "fornecedor": "vendor", "fornecedores": "vendor",
    "type": "type", "types": "type", "tipo": "type", "tipos": "type",
    "sector": "sector", "sectors": "sector", "setor": "sector", "setores": "sector",
    "location": "location", "locations": "location", "local": "location", "locais": "location",
}


def resolve_category(category: str) -> Optional[str]:
    if not isinstance(category, str):
        return None
    return _CATEGORY_ALIASES.get(normalize_name(category))


@dataclass(frozen=True)
class GeneratedHostname:
    hostname: str
    vendor: str
    type: str
    sector: str
    location: str
    number: int
    index_in_batch: int  # 1-based
    created_at: str


@dataclass(frozen=True)
class DecodedHostname:
    hostname: str
    vendor: Optional[str]
    type: Optional[str]
    sector: Optional[str]
    location: Optional[str]
    number: int
    codes: Dict[str, str]


@dataclass(frozen=True)
class SectorSummary:
    name: str
    code: Optional[str]
    count: int
    hostnames: tuple[str, ...]


class HostnameGenerator:
    """
    Issues PREFIX-<vendor><type><sector><location>-<seq> hostnames.

    Sequence numbers are scoped per sector: the lowest free number in the
    sector bucket is taken, whatever the other three attributes are.

    The generator does no I/O of its own. An optional SnapshotStore is read
    once on construction and written after every mutation; an optional
    AuditLogger receives one entry per mutation.
    """

    def __init__(
        self,
        scheme: Optional[NamingScheme] = None,
        snapshot: Snapshot | Mapping[str, Any] | None = None,
        store: Optional[SnapshotStore] = None,
        audit: Optional[AuditLogger] = None,
    ):
        self._scheme = scheme or NamingScheme()
        self._store = store
        self._audit = audit

        self._catalogs: Dict[str, CategoryCatalog] = {
            "vendor": CategoryCatalog("Vendor", self._scheme.vendors),
            "type": CategoryCatalog("Type", self._scheme.types),
            "sector": CategoryCatalog("Sector", self._scheme.sectors),
            "location": CategoryCatalog("Location", self._scheme.locations),
        }
        self._allocations = AllocationTable(width=self._scheme.sequence_width)

        width = self._scheme.sequence_width
        self._format_re = re.compile(
            rf"{re.escape(self._scheme.prefix)}-([A-Z0-9]{{1,2}}[A-Z][0-9]{{2}}[0-9])-([0-9]{{{width},}})",
            re.ASCII,
        )

        if snapshot is None and store is not None:
            snapshot = store.load()
        if snapshot is not None:
            self._restore(snapshot)

    @staticmethod
    def now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    @property
    def scheme(self) -> NamingScheme:
        return self._scheme

    # -------- Generation --------

    def generate(
        self,
        vendor: str,
        type: str,
        sector: str,
        location: str,
        count: int = 1,
    ) -> list[GeneratedHostname]:
        fields = {"vendor": vendor, "type": type, "sector": sector, "location": location}

        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ValidationError(f"All fields are required. Missing: {', '.join(missing)}")

        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValidationError(f"Count must be a positive integer, got {count!r}.")

        # Resolve every code before touching the allocation table: no partial batch
        codes: Dict[str, str] = {}
        for category, value in fields.items():
            catalog = self._catalogs[category]
            code = catalog.code_for(value) if isinstance(value, str) else None
            if code is None:
                raise UnknownCategoryError(
                    f"Unknown {category} '{value}'. Known: {', '.join(catalog.names())}"
                )
            codes[category] = code

        middle = "".join(codes[c] for c in CATEGORIES)
        bucket = normalize_name(sector)
        before = self._allocations.to_mapping()
        numbers = self._allocations.allocate(bucket, count, lambda n: self._render(middle, n))

        batch = [
            GeneratedHostname(
                hostname=self._render(middle, n),
                vendor=normalize_name(vendor),
                type=normalize_name(type),
                sector=bucket,
                location=normalize_name(location),
                number=n,
                index_in_batch=i,
                created_at=self.now_iso(),
            )
            for i, n in enumerate(numbers, start=1)
        ]

        try:
            self._persist()
        except Exception:
            # Unsaved numbers must not stay allocated
            self._allocations = AllocationTable.from_mapping(before, width=self._scheme.sequence_width)
            raise

        self._log(
            action="generate",
            category="sector",
            detail=f"{len(batch)} hostname(s) in sector '{bucket}'",
            hostnames=tuple(h.hostname for h in batch),
            sector=bucket,
        )
        return batch

    def get_next_available(self, sector: str) -> int:
        return self._allocations.next_free(normalize_name(sector))

    def _render(self, middle: str, number: int) -> str:
        return f"{self._scheme.prefix}-{middle}-{self._allocations.pad(number)}"

    # -------- Format / decode --------

    def validate_format(self, hostname: str) -> bool:
        return isinstance(hostname, str) and self._format_re.fullmatch(hostname) is not None

    def decode(self, hostname: str) -> Optional[DecodedHostname]:
        if not self.validate_format(hostname):
            return None

        m = self._format_re.fullmatch(hostname)
        middle, seq = m.group(1), m.group(2)

        # Positional split from the right; whatever is left is the vendor code
        codes = {
            "vendor": middle[:-4],
            "type": middle[-4],
            "sector": middle[-3:-1],
            "location": middle[-1],
        }

        return DecodedHostname(
            hostname=hostname,
            vendor=self._catalogs["vendor"].name_for(codes["vendor"]),
            type=self._catalogs["type"].name_for(codes["type"]),
            sector=self._catalogs["sector"].name_for(codes["sector"]),
            location=self._catalogs["location"].name_for(codes["location"]),
            number=int(seq),
            codes=codes,
        )

    # -------- Catalogs --------

    def catalog(self, category: str) -> Optional[CategoryCatalog]:
        key = resolve_category(category)
        return self._catalogs[key] if key else None

    def vendors(self) -> list[str]:
        return self._catalogs["vendor"].names()

    def types(self) -> list[str]:
        return self._catalogs["type"].names()

    def sectors(self) -> list[str]:
        return self._catalogs["sector"].names()

    def locations(self) -> list[str]:
        return self._catalogs["location"].names()

    def add_vendor(self, name: str, code: str) -> None:
        self._add("vendor", name, code)

    def add_type(self, name: str, code: str) -> None:
        self._add("type", name, code)

    def add_sector(self, name: str, code: str) -> None:
        self._add("sector", name, code)

    def add_location(self, name: str, code: str) -> None:
        self._add("location", name, code)

    def _add(self, category: str, name: str, code: str) -> None:
        catalog = self._catalogs[category]
        catalog.add(name, code)
        try:
            self._persist()
        except Exception:
            catalog.remove(name)
            raise
        self._log(action="add", category=category, detail=f"{normalize_name(name)}={code}")

    def remove_item(self, category: str, name: str) -> bool:
        """
        Removes a name from a catalog. Hostnames already issued with its code
        stay in the allocation table.
        """
        key = resolve_category(category)
        if key is None or not isinstance(name, str):
            return False
        catalog = self._catalogs[key]
        code = catalog.code_for(name)
        if not catalog.remove(name):
            return False
        try:
            self._persist()
        except Exception:
            catalog.add(name, code)
            raise
        self._log(action="remove", category=key, detail=normalize_name(name))
        return True

    # -------- Reporting --------

    def sector_summary(self) -> Dict[str, SectorSummary]:
        summary: Dict[str, SectorSummary] = {}
        for bucket in self._allocations.buckets():
            hostnames = self._allocations.hostnames(bucket)
            if not hostnames:
                continue
            summary[bucket] = SectorSummary(
                name=bucket,
                code=self._catalogs["sector"].code_for(bucket),
                count=len(hostnames),
                hostnames=tuple(hostnames),
            )
        return summary

    def allocated_numbers(self, sector: str) -> list[int]:
        return self._allocations.numbers(normalize_name(sector))

    # -------- Snapshot --------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            vendors=self._catalogs["vendor"].additions(self._scheme.vendors),
            types=self._catalogs["type"].additions(self._scheme.types),
            sectors=self._catalogs["sector"].additions(self._scheme.sectors),
            locations=self._catalogs["location"].additions(self._scheme.locations),
            allocations=self._allocations.to_mapping(),
        )

    def _restore(self, snapshot: Snapshot | Mapping[str, Any]) -> None:
        if not isinstance(snapshot, Snapshot):
            snapshot = Snapshot.model_validate(snapshot)

        self._catalogs["vendor"].merge(snapshot.vendors)
        self._catalogs["type"].merge(snapshot.types)
        self._catalogs["sector"].merge(snapshot.sectors)
        self._catalogs["location"].merge(snapshot.locations)

        merged: Dict[str, Dict[str, str]] = {}
        for bucket, entries in snapshot.allocations.items():
            merged.setdefault(normalize_name(bucket), {}).update(entries)
        self._allocations = AllocationTable.from_mapping(merged, width=self._scheme.sequence_width)

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save(self.snapshot())

    def _log(self, **fields: Any) -> None:
        if self._audit is not None:
            self._audit.log(AuditLogEntry(timestamp=AuditLogger.now_iso(), **fields))
