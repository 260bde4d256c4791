"""Bootstrap type catalog (pg_type) reference data.

The page decoder never consults this table: it surfaces raw payload bytes.
Callers that want to label or pretty-print payloads load a TypeCatalog once
and pass it around explicitly. There is no module-level instance.

Rows use pg_type's own column names, one JSON object per line:

    {"oid": 23, "typname": "int4", "typlen": 4, "typbyval": true, ...}
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, NewType

from pydantic import BaseModel, ConfigDict, Field, field_validator

Oid = NewType("Oid", int)
"""Object identifier of a catalog row."""

Regproc = NewType("Regproc", int)
"""Oid of a function referenced from the catalog."""


class TypeType(str, Enum):
    """typtype: kind of type."""

    BASE = "b"
    COMPOSITE = "c"
    DOMAIN = "d"
    ENUM = "e"
    MULTIRANGE = "m"
    PSEUDO = "p"
    RANGE = "r"


class TypeCategory(str, Enum):
    """typcategory: coarse classification used for implicit casts."""

    INVALID = "\0"
    ARRAY = "A"
    BOOLEAN = "B"
    COMPOSITE = "C"
    DATE_TIME = "D"
    ENUM = "E"
    GEOMETRIC = "G"
    NETWORK = "I"
    NUMERIC = "N"
    PSEUDO_TYPE = "P"
    RANGE = "R"
    STRING = "S"
    TIME_SPAN = "T"
    USER = "U"
    BIT_STRING = "V"
    UNKNOWN = "X"
    INTERNAL = "Z"


class TypeAlign(str, Enum):
    """typalign: alignment required when storing a value."""

    CHAR = "c"
    SHORT = "s"
    INT = "i"
    DOUBLE = "d"

    @property
    def alignment(self) -> int:
        """Alignment in bytes."""
        return {"c": 1, "s": 2, "i": 4, "d": 8}[self.value]


class TypeStorage(str, Enum):
    """typstorage: default TOAST strategy."""

    PLAIN = "p"
    EXTERNAL = "e"
    EXTENDED = "x"
    MAIN = "m"


class AclItem(BaseModel):
    """One access privilege entry."""

    model_config = ConfigDict(frozen=True)

    grantee: Oid
    grantor: Oid
    privileges: int


class PgType(BaseModel):
    """A row of pg_type.

    Oid-valued references stored as 0 in the catalog ("none") become None.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    oid: Oid
    name: str = Field(alias="typname")
    namespace: Oid = Field(default=Oid(0), alias="typnamespace")
    owner: Oid = Field(default=Oid(0), alias="typowner")
    length: int = Field(alias="typlen", description="Fixed size; negative for varlena/cstring")
    by_value: bool = Field(default=False, alias="typbyval")
    type_type: TypeType = Field(default=TypeType.BASE, alias="typtype")
    category: TypeCategory = Field(default=TypeCategory.USER, alias="typcategory")
    is_preferred: bool = Field(default=False, alias="typispreferred")
    is_defined: bool = Field(default=True, alias="typisdefined")
    delimiter: str = Field(default=",", alias="typdelim", min_length=1, max_length=1)
    relation_id: Oid | None = Field(default=None, alias="typrelid")
    element: Oid | None = Field(default=None, alias="typelem")
    array: Oid | None = Field(default=None, alias="typarray")
    input: Regproc = Field(default=Regproc(0), alias="typinput")
    output: Regproc = Field(default=Regproc(0), alias="typoutput")
    receive: Regproc = Field(default=Regproc(0), alias="typreceive")
    send: Regproc = Field(default=Regproc(0), alias="typsend")
    mod_in: Regproc = Field(default=Regproc(0), alias="typmodin")
    mod_out: Regproc = Field(default=Regproc(0), alias="typmodout")
    analyze: Regproc = Field(default=Regproc(0), alias="typanalyze")
    align: TypeAlign = Field(default=TypeAlign.INT, alias="typalign")
    storage: TypeStorage = Field(default=TypeStorage.PLAIN, alias="typstorage")
    not_null: bool = Field(default=False, alias="typnotnull")
    base_type: Oid | None = Field(default=None, alias="typbasetype")
    type_mod: int = Field(default=-1, alias="typtypmod")
    dimensions: int = Field(default=0, alias="typndims")
    collation: Oid | None = Field(default=None, alias="typcollation")
    default_binary: str | None = Field(default=None, alias="typdefaultbin")
    default: str | None = Field(default=None, alias="typdefault")
    acl: list[AclItem] = Field(default_factory=list, alias="typacl")

    @field_validator("relation_id", "element", "array", "base_type", "collation", mode="before")
    @classmethod
    def _zero_oid_is_none(cls, value: object) -> object:
        return None if value == 0 else value

    @field_validator("acl", mode="before")
    @classmethod
    def _null_acl_is_empty(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def is_varlena(self) -> bool:
        """Variable-length type with a length word (typlen -1)."""
        return self.length == -1


class TypeCatalog:
    """Read-only lookup table of pg_type rows by oid and by name.

    Example:
        >>> catalog = TypeCatalog.from_path("pg_type.jsonl")
        >>> catalog.by_name("int4").length
        4
    """

    def __init__(self, types: Iterable[PgType]) -> None:
        self._by_oid: dict[int, PgType] = {}
        self._by_name: dict[str, PgType] = {}
        for pg_type in types:
            if pg_type.oid in self._by_oid:
                raise ValueError(f"Duplicate type oid {pg_type.oid}")
            self._by_oid[pg_type.oid] = pg_type
            self._by_name[pg_type.name] = pg_type

    @classmethod
    def from_json_lines(cls, lines: Iterable[str]) -> TypeCatalog:
        """Build a catalog from JSON objects, one per line; blank lines are skipped.

        Raises:
            pydantic.ValidationError: If a row is malformed
        """
        return cls(
            PgType.model_validate_json(line) for line in lines if line.strip()
        )

    @classmethod
    def from_path(cls, path: str | Path) -> TypeCatalog:
        """Load a JSON-lines catalog file."""
        with open(path, encoding="utf-8") as f:
            return cls.from_json_lines(f)

    def by_oid(self, oid: int) -> PgType | None:
        return self._by_oid.get(oid)

    def by_name(self, name: str) -> PgType | None:
        return self._by_name.get(name)

    def __len__(self) -> int:
        return len(self._by_oid)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            return key in self._by_name
        return key in self._by_oid

    def __iter__(self) -> Iterator[PgType]:
        return iter(self._by_oid.values())
