"""Naming and override options.

The two public operations deliberately default to different naming styles:
loading uses ``SCREAMING_SNAKE_CASE`` joined by ``_`` while array overrides use
``snake_case`` joined by ``__`` so that the ``every``/``each`` markers stand out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

CaseStyle = Literal["snake_case", "SCREAMING_SNAKE_CASE"]

CASE_STYLES: Final[tuple[str, ...]] = ("snake_case", "SCREAMING_SNAKE_CASE")


@dataclass(frozen=True, slots=True)
class EnvVarNamingOptions:
    """Control how property paths become environment variable names.

    Examples
    --------
    >>> EnvVarNamingOptions()
    EnvVarNamingOptions(case='SCREAMING_SNAKE_CASE', property_separator='_', prefix=None)
    """

    case: CaseStyle = "SCREAMING_SNAKE_CASE"
    property_separator: str = "_"
    prefix: str | None = None


@dataclass(frozen=True, slots=True)
class ArrayOverrideOptions:
    """Naming options for array overrides plus target-length policies.

    ``extend_target_arrays`` appends bare elements when an ``each`` value is
    longer than the target array; ``truncate_target_arrays`` drops trailing
    elements when it is shorter.
    """

    case: CaseStyle = "snake_case"
    property_separator: str = "__"
    prefix: str | None = None
    truncate_target_arrays: bool = False
    extend_target_arrays: bool = False


DEFAULT_OPTIONS: Final[EnvVarNamingOptions] = EnvVarNamingOptions()
DEFAULT_OVERRIDE_OPTIONS: Final[ArrayOverrideOptions] = ArrayOverrideOptions()
