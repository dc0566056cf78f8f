"""Shared building blocks for resource handlers: object cache, metadata and quantities."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from fractions import Fraction
from typing import Any, Iterable, Iterator, Mapping


def _kind_of(obj: Any) -> str | None:
    if isinstance(obj, Mapping):
        return obj.get("kind")
    return None


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


class Informer:
    """In-memory cache of cluster objects, fed by an informer factory."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._store: list = []

    def add(self, obj: Any) -> None:
        """Put an object into the cache, whatever its kind."""
        self._store.append(obj)

    def list(self) -> list:
        """Return a snapshot of every cached object."""
        return list(self._store)

    def has_synced(self) -> bool:
        """The cache is filled on creation, so it is always in sync."""
        return True


class InformerFactory:
    """Hands out one shared informer per object kind."""

    def __init__(self, objects: Iterable[Any] = ()) -> None:
        self._objects = list(objects)
        self._informers: dict[str, Informer] = {}

    def informer(self, kind: str) -> Informer:
        """Return the shared informer for ``kind``, creating it on first use."""
        existing = self._informers.get(kind)
        if existing is not None:
            return existing
        created = Informer(kind)
        for obj in self._objects:
            if _kind_of(obj) == kind:
                created.add(obj)
        self._informers[kind] = created
        return created

    def add(self, obj: Any) -> None:
        """Add an object to the cluster view and to any informer watching its kind."""
        self._objects.append(obj)
        watcher = self._informers.get(_kind_of(obj))
        if watcher is not None:
            watcher.add(obj)


@dataclass(kw_only=True)
class LogEntryMetadata:
    """Fields common to every log entry."""

    timestamp: datetime
    resource_type: str
    name: str
    namespace: str
    created_timestamp: int
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    created_by_kind: str = ""
    created_by_name: str = ""


class BaseHandler:
    """Common state of a resource handler: client, logger and informer."""

    def __init__(self, client: Any = None) -> None:
        self.client = client
        self.logger: Any = None
        self._informer: Informer | None = None

    def setup_base_informer(self, informer: Informer, logger: Any) -> None:
        self._informer = informer
        self.logger = logger

    def get_informer(self) -> Informer | None:
        return self._informer

    def objects_of_kind(self, kind: str) -> Iterator[Mapping[str, Any]]:
        """Yield cached objects of ``kind``, skipping anything else in the cache."""
        if self._informer is None:
            return
        for obj in self._informer.list():
            if _kind_of(obj) == kind:
                yield obj


class _Format(Enum):
    DECIMAL_SI = "DecimalSI"
    BINARY_SI = "BinarySI"
    DECIMAL_EXPONENT = "DecimalExponent"


_BINARY_SUFFIXES = ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei")
_DECIMAL_EXPONENTS = {"n": -9, "u": -6, "m": -3, "": 0, "k": 3, "M": 6, "G": 9, "T": 12, "P": 15, "E": 18}
_DECIMAL_SUFFIXES = {exp: suffix for suffix, exp in _DECIMAL_EXPONENTS.items()}
_QUANTITY_RE = re.compile(
    r"^([+-]?)(\d+(?:\.\d*)?|\.\d+)"
    r"(?:[eE]([+-]?\d+)|(Ki|Mi|Gi|Ti|Pi|Ei)|([numkMGTPE]?))$"
)
_NANO = Fraction(1, 10**9)


def _parse(text: Any) -> tuple[Fraction, _Format]:
    if isinstance(text, bool) or not isinstance(text, (str, int, float)):
        raise ValueError(f"invalid quantity: {text!r}")
    match = _QUANTITY_RE.match(str(text).strip())
    if match is None:
        raise ValueError(f"invalid quantity: {text!r}")
    sign, number, exponent, binary, decimal = match.groups()
    magnitude = Fraction(number)
    if exponent is not None:
        magnitude *= Fraction(10) ** int(exponent)
        fmt = _Format.DECIMAL_EXPONENT
    elif binary is not None:
        magnitude *= 1024 ** _BINARY_SUFFIXES.index(binary)
        fmt = _Format.BINARY_SI
    else:
        magnitude *= Fraction(10) ** _DECIMAL_EXPONENTS[decimal or ""]
        fmt = _Format.DECIMAL_SI
    # Precision stops at nano units; anything finer is rounded up.
    magnitude = math.ceil(magnitude / _NANO) * _NANO
    return (-magnitude if sign == "-" else magnitude), fmt


def parse_quantity(text: Any) -> Fraction:
    """Parse a resource quantity such as ``10Gi`` or ``250m`` into an exact number."""
    return _parse(text)[0]


def quantity_value(text: Any) -> int:
    """Return a quantity as an integer, rounded up away from zero."""
    value = parse_quantity(text)
    magnitude = math.ceil(abs(value))
    return -magnitude if value < 0 else magnitude


def quantity_string(text: Any) -> str:
    """Return the canonical text form of a quantity, keeping its notation."""
    value, fmt = _parse(text)
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if fmt is _Format.BINARY_SI and magnitude >= 1024 and magnitude.denominator == 1:
        amount = magnitude.numerator
        power = 0
        while power < len(_BINARY_SUFFIXES) - 1 and amount % 1024 == 0:
            amount //= 1024
            power += 1
        return f"{sign}{amount}{_BINARY_SUFFIXES[power]}"
    amount = int(magnitude / _NANO)
    exponent = -9
    while exponent < 18 and amount % 1000 == 0:
        amount //= 1000
        exponent += 3
    if fmt is _Format.DECIMAL_EXPONENT:
        suffix = f"e{exponent}" if exponent else ""
    else:
        suffix = _DECIMAL_SUFFIXES[exponent]
    return f"{sign}{amount}{suffix}"


def condition_status(status: Any) -> bool | None:
    """Map a condition status to True, False, or None when unknown."""
    if status == "True":
        return True
    if status == "False":
        return False
    return None


def should_include_namespace(namespaces: Iterable[str], namespace: str) -> bool:
    """An empty namespace filter includes everything."""
    wanted = list(namespaces or ())
    return not wanted or namespace in wanted


def owner_reference_info(obj: Mapping[str, Any]) -> tuple[str, str]:
    """Return kind and name of the first owner reference, or empty strings."""
    owners = _metadata(obj).get("ownerReferences") or []
    if not owners:
        return "", ""
    first = owners[0]
    return first.get("kind", ""), first.get("name", "")


def creation_timestamp(obj: Mapping[str, Any]) -> int:
    """Return the creation time as Unix seconds, or 0 when it is not set."""
    created = _metadata(obj).get("creationTimestamp")
    if created is None or created == "":
        return 0
    if isinstance(created, (int, float)) and not isinstance(created, bool):
        return int(created)
    if isinstance(created, str):
        created = datetime.fromisoformat(created.replace("Z", "+00:00"))
    if not isinstance(created, datetime):
        raise ValueError(f"invalid creation timestamp: {created!r}")
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return int(created.timestamp())


def build_metadata(obj: Mapping[str, Any], resource_type: str) -> LogEntryMetadata:
    """Build the common log entry fields for a cluster object."""
    meta = _metadata(obj)
    kind, name = owner_reference_info(obj)
    return LogEntryMetadata(
        timestamp=datetime.now(timezone.utc),
        resource_type=resource_type,
        name=meta.get("name", ""),
        namespace=meta.get("namespace", ""),
        created_timestamp=creation_timestamp(obj),
        labels=dict(meta.get("labels") or {}),
        annotations=dict(meta.get("annotations") or {}),
        created_by_kind=kind,
        created_by_name=name,
    )