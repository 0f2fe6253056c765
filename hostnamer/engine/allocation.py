from __future__ import annotations

from typing import Callable, Dict, Mapping


class AllocationTable:
    """
    Per-bucket registry of allocated sequence numbers.

    Each bucket maps the zero-padded number (at least `width` digits, never
    truncated) to the hostname it was issued for. Buckets only grow.
    """

    def __init__(self, width: int = 3):
        self._width = width
        self._buckets: Dict[str, Dict[str, str]] = {}

    def pad(self, number: int) -> str:
        return str(number).zfill(self._width)

    def numbers(self, bucket: str) -> list[int]:
        return sorted(int(k) for k in self._buckets.get(bucket, {}))

    def next_free(self, bucket: str) -> int:
        used = set(self.numbers(bucket))
        candidate = 1
        while candidate in used:
            candidate += 1
        return candidate

    def allocate(self, bucket: str, count: int, render: Callable[[int], str]) -> list[int]:
        entries = self._buckets.setdefault(bucket, {})
        used = set(self.numbers(bucket))

        picked: list[int] = []
        candidate = 1
        for _ in range(count):
            while candidate in used:
                candidate += 1
            entries[self.pad(candidate)] = render(candidate)
            used.add(candidate)
            picked.append(candidate)
            candidate += 1
        return picked

    def hostnames(self, bucket: str) -> list[str]:
        entries = self._buckets.get(bucket, {})
        return [entries[k] for k in sorted(entries, key=int)]

    def buckets(self) -> list[str]:
        return list(self._buckets)

    def to_mapping(self) -> Dict[str, Dict[str, str]]:
        return {bucket: dict(entries) for bucket, entries in self._buckets.items()}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Mapping[str, str]], width: int = 3) -> "AllocationTable":
        table = cls(width=width)
        for bucket, entries in mapping.items():
            target = table._buckets.setdefault(bucket, {})
            for key, hostname in entries.items():
                # Only positive decimal sequence numbers are meaningful
                if not (key.isascii() and key.isdigit()) or int(key) < 1:
                    continue
                target[table.pad(int(key))] = hostname
        return table
