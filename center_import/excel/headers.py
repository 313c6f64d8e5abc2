from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .cells import is_blank

"""Header/key normalizer.

Maps the many human spellings of a column header onto one logical field:
"Teacher Username", "teacher_username" and "teacherusername" all normalize
to the same key.
"""

__all__ = [
    "norm_key",
    "pick",
]

_SEPARATORS = re.compile(r"[\s_\-]+")


def norm_key(k: Any) -> str:
    return _SEPARATORS.sub("", str(k if k is not None else "").strip().lower())


def pick(row: Mapping[str, Any], aliases: Iterable[str]) -> Any:
    """Return the first non-blank value whose header matches one of ``aliases``.

    Alias order is priority order. When two raw headers normalize to the same
    key, the one appearing first in the sheet wins.
    """
    normalized: dict[str, Any] = {}
    for header, value in row.items():
        normalized.setdefault(norm_key(header), value)
    for alias in aliases:
        value = normalized.get(norm_key(alias))
        if not is_blank(value):
            return value
    return None
