from __future__ import annotations

from typing import Dict
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DEFAULT_VENDORS = {"Condor": "1", "Volker": "3", "Vivo": "5", "Sellbetti": "2"}
DEFAULT_TYPES = {"laptop": "L", "desktop": "D", "servidor": "S", "impressora": "I", "celular": "C"}
DEFAULT_SECTORS = {"ti": "01", "rh": "02", "financeiro": "03"}
DEFAULT_LOCATIONS = {"fabrica": "1", "escritorio": "2", "deposito": "4"}


class NamingScheme(BaseModel):
    prefix: str = "CNL"
    sequence_width: int = Field(default=3, ge=1)
    vendors: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_VENDORS))
    types: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TYPES))
    sectors: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SECTORS))
    locations: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_LOCATIONS))


class Snapshot(BaseModel):
    """
    Serializable generator state handed to/from a SnapshotStore.
    Catalog maps hold only non-default entries.
    Older saves used Portuguese keys; those are accepted on input.
    """
    vendors: Dict[str, str] = Field(default_factory=dict, validation_alias=AliasChoices("vendors", "fornecedores"))
    types: Dict[str, str] = Field(default_factory=dict, validation_alias=AliasChoices("types", "tipos"))
    sectors: Dict[str, str] = Field(default_factory=dict, validation_alias=AliasChoices("sectors", "setores"))
    locations: Dict[str, str] = Field(default_factory=dict, validation_alias=AliasChoices("locations", "locais"))
    allocations: Dict[str, Dict[str, str]] = Field(
        default_factory=dict, validation_alias=AliasChoices("allocations", "maquinas")
    )

    model_config = ConfigDict(populate_by_name=True)
