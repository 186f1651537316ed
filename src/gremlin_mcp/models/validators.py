"""Shared Pydantic types and validators for reuse across models.

Centralises name-list normalisation, bounded integers, and Literal enums so
settings, schema models, and tool inputs speak the same language.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, Field
from pydantic_settings import NoDecode

# ---------------------------------------------------------------------------
# Name-list normalisation
# ---------------------------------------------------------------------------


def normalize_names(v: Any) -> list[str]:
    """Accept ``str | list | set | None`` and return a clean ``list[str]``.

    * ``"id, pk,name"`` → ``["id", "pk", "name"]``
    * ``["id", None, " pk "]`` → ``["id", "pk"]``
    * ``None`` → ``[]``

    Duplicates are dropped, first occurrence wins.
    """
    if v is None:
        return []
    if isinstance(v, str):
        items = v.split(",")
    elif isinstance(v, (list, tuple, set, frozenset)):
        items = [item for item in v if item is not None]
    else:
        return []

    names: list[str] = []
    for item in items:
        name = str(item).strip()
        if name and name not in names:
            names.append(name)
    return names


NameList = Annotated[list[str], NoDecode, BeforeValidator(normalize_names)]
"""Flexible name input: comma-separated string or sequence, always outputs list[str]."""


# ---------------------------------------------------------------------------
# Numeric types
# ---------------------------------------------------------------------------

PositiveInt = Annotated[int, Field(ge=1)]
"""Integer ≥ 1, used for batch sizes and timeouts."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer ≥ 0: counts and thresholds."""

Port = Annotated[int, Field(ge=1, le=65535)]


# ---------------------------------------------------------------------------
# Literal enums
# ---------------------------------------------------------------------------

ElementKind = Literal["vertex", "edge"]
ImportFormat = Literal["graphson", "csv"]
ExportFormat = Literal["graphson", "json", "csv"]
Transport = Literal["stdio", "http"]
LogLevel = Literal["error", "warn", "warning", "info", "debug"]
