"""JSON value aliases and the sentinel for "no value".

``None`` is a legitimate configuration value (the JSON ``null``), so parse
and read helpers signal absence with :data:`MISSING` instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Final, Literal, Union

JSONValue = Any
"""Any JSON-compatible value: ``dict``/``list``/``str``/``int``/``float``/``bool``/``None``."""


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing.MISSING

Maybe = Union[JSONValue, Literal[_Missing.MISSING]]
