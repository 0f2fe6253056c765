from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional


class CatalogError(ValueError):
    pass


class DuplicateNameError(CatalogError):
    pass


class DuplicateCodeError(CatalogError):
    pass


def normalize_name(name: str) -> str:
    return name.strip().lower()


class CategoryCatalog:
    """
    name -> code mapping for one categorical attribute (vendor, type, sector, location).

    Names are case-insensitive: every key goes through normalize_name() before it
    is stored or looked up. Codes are unique and indexed (code -> name), so
    reverse lookups never depend on insertion order.
    """

    def __init__(self, label: str, entries: Optional[Mapping[str, str]] = None):
        self.label = label
        self._codes: Dict[str, str] = {}
        self._names: Dict[str, str] = {}
        for name, code in (entries or {}).items():
            self.add(name, code)

    def add(self, name: str, code: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise CatalogError(f"{self.label} name must be a non-empty string.")
        if not isinstance(code, str) or not code:
            raise CatalogError(f"{self.label} code must be a non-empty string.")

        key = normalize_name(name)
        if key in self._codes:
            raise DuplicateNameError(f"{self.label} '{key}' already exists.")
        if code in self._names:
            raise DuplicateCodeError(
                f"{self.label} code '{code}' is already used by '{self._names[code]}'."
            )

        self._codes[key] = code
        self._names[code] = key

    def remove(self, name: str) -> bool:
        key = normalize_name(name)
        code = self._codes.pop(key, None)
        if code is None:
            return False
        del self._names[code]
        return True

    def merge(self, additions: Mapping[str, str]) -> list[str]:
        """
        Adds entries whose name is not present yet. Existing keys are never
        overwritten; an addition reusing a taken code is skipped.
        Returns the keys that were actually added.
        """
        added = []
        for name, code in additions.items():
            try:
                self.add(name, code)
            except CatalogError:
                continue
            added.append(normalize_name(name))
        return added

    def additions(self, defaults: Iterable[str]) -> Dict[str, str]:
        default_keys = {normalize_name(n) for n in defaults}
        return {k: c for k, c in self._codes.items() if k not in default_keys}

    def code_for(self, name: str) -> Optional[str]:
        return self._codes.get(normalize_name(name))

    def name_for(self, code: str) -> Optional[str]:
        return self._names.get(code)

    def names(self) -> list[str]:
        return list(self._codes)

    def items(self) -> list[tuple[str, str]]:
        return list(self._codes.items())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._codes

    def __len__(self) -> int:
        return len(self._codes)
