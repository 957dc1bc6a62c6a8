"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the walker, the loaders and the composition
root rely on so each concrete implementation stays replaceable.

Contents
--------
* :class:`NamingOptions` – anything that names env vars (both option types).
* :class:`Visitor` – callbacks driven by :func:`walk_config_properties`.
* :class:`EnvReader` – reads and parses the value for one property path.
* :class:`DocumentLoader` – parses schema/config documents for the CLI.

System Role
-----------
These protocols enforce Dependency Inversion (DIP): the application layer
requests behaviour through them and never imports an adapter directly.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from ..domain.path import ConfigPropertyPath
from ..domain.schema import JSONSchema
from ..domain.values import Maybe


@runtime_checkable
class NamingOptions(Protocol):
    """Options consulted while deriving environment variable names."""

    @property
    def case(self) -> str: ...

    @property
    def property_separator(self) -> str: ...

    @property
    def prefix(self) -> str | None: ...


class Visitor(Protocol):
    """Receive every schema node reached by the walker.

    Methods
    -------
    :meth:`visit_schema`
        Called for each non-applicator node, including the root (empty path).
    :meth:`visit_pattern_property`
        Called once per ``patternProperties`` entry of a node.
    :meth:`visit_additional_properties`
        Called when ``additionalProperties`` holds a schema object.
    """

    def visit_schema(self, schema: JSONSchema, path: ConfigPropertyPath) -> None:
        """Handle the node located at *path*."""

    def visit_pattern_property(self, pattern: str, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        """Handle unnamed properties of *parent_path* whose names match *pattern*."""

    def visit_additional_properties(self, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        """Handle unnamed properties of *parent_path* described by *schema*."""


@runtime_checkable
class EnvReader(Protocol):
    """Resolve the typed value of one property from the environment."""

    @property
    def environ(self) -> Mapping[str, str]:
        """Environment variables visible to this reader."""

    def read(self, schema: JSONSchema, path: ConfigPropertyPath) -> Maybe:
        """Return the parsed value for *path* or :data:`MISSING` when unavailable."""


@runtime_checkable
class DocumentLoader(Protocol):
    """Parse a structured document into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``/``NotFound``."""
