"""Environment variable adapter.

Purpose
-------
Read the value for one property path from an environment mapping, falling
back to a ``<NAME><separator>FILE`` variable whose value names a file holding
the real value (the Docker/Kubernetes secrets convention).

Key behaviours
--------------
* A direct value takes precedence over the file variant.
* File contents are read as UTF-8 and trimmed; unreadable or empty files count
  as absent and are never raised.
* Each env var name is consumed at most once per call: the first property path
  that successfully parses it claims it and later claimants are skipped. A
  claimed name only blocks itself; the sibling direct or file name of another
  path stays readable.
* Emits structured logging via :mod:`lib_schema_env_config.observability`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from ...application.naming import get_env_var_name
from ...application.parsing import parse_env_var_value
from ...application.ports import NamingOptions
from ...domain.path import FILE, ConfigPropertyPath
from ...domain.schema import JSONSchema
from ...domain.values import MISSING, Maybe
from ...observability import log_debug, make_event


class DefaultEnvReader:
    """Resolve property values from an environment mapping.

    One reader lives for exactly one load or override call; its ledger of
    consumed names must not leak into another call.
    """

    def __init__(self, options: NamingOptions, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the reader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        options:
            Naming options used to derive env var names from property paths.
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._options = options
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        self._consumed: dict[str, ConfigPropertyPath] = {}

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ

    @property
    def consumed(self) -> Mapping[str, ConfigPropertyPath]:
        """Env var names claimed so far, mapped to the path that claimed them."""

        return self._consumed

    def read(self, schema: JSONSchema, path: ConfigPropertyPath) -> Maybe:
        """Return the value for *path* parsed against *schema*, or :data:`MISSING`.

        Examples
        --------
        >>> from lib_schema_env_config.domain.options import EnvVarNamingOptions
        >>> from lib_schema_env_config.domain.path import NamedSegment
        >>> reader = DefaultEnvReader(EnvVarNamingOptions(), environ={'PORT': '8080'})
        >>> reader.read({'type': 'integer'}, (NamedSegment('port'),))
        8080
        >>> reader.read({'type': 'string'}, (NamedSegment('port'),))
        MISSING
        """

        name = get_env_var_name(path, self._options)
        file_name = get_env_var_name(path + (FILE,), self._options)
        log_debug("env_var_name_derived", **make_event(name, path))

        # An earlier branch already resolved this path.
        if path in (self._consumed.get(name), self._consumed.get(file_name)):
            return MISSING

        value: Maybe = MISSING
        if not self._already_claimed(name, path):
            value = self._read_direct(name, schema, path)
        if value is MISSING and not self._already_claimed(file_name, path):
            value = self._read_file(file_name, schema, path)
        return value

    def _already_claimed(self, name: str, path: ConfigPropertyPath) -> bool:
        previous = self._consumed.get(name)
        if previous is None:
            return False
        log_debug("env_var_conflict", **make_event(name, path, {"claimed_by": [segment.value for segment in previous]}))
        return True

    def _read_direct(self, name: str, schema: JSONSchema, path: ConfigPropertyPath) -> Maybe:
        raw = self._environ.get(name)
        if raw is None:
            return MISSING
        value = parse_env_var_value(name, raw, schema)
        if value is not MISSING:
            self._consumed[name] = path
            log_debug("env_var_loaded", **make_event(name, path, {"raw": raw}))
        return value

    def _read_file(self, file_name: str, schema: JSONSchema, path: ConfigPropertyPath) -> Maybe:
        file_path = self._environ.get(file_name)
        if file_path is None:
            return MISSING
        raw = read_file_variant(file_name, file_path)
        if raw is None:
            return MISSING
        value = parse_env_var_value(file_name, raw, schema)
        if value is not MISSING:
            self._consumed[file_name] = path
            log_debug("env_var_loaded", **make_event(file_name, path, {"file": file_path}))
        return value


def read_file_variant(env_var_name: str, file_path: str) -> str | None:
    """Return the trimmed UTF-8 contents of *file_path*, or ``None`` if unusable.

    Examples
    --------
    >>> from tempfile import NamedTemporaryFile
    >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8')
    >>> _ = tmp.write('  s3cret\\n')
    >>> tmp.close()
    >>> read_file_variant('PASSWORD_FILE', tmp.name)
    's3cret'
    >>> Path(tmp.name).unlink()
    >>> read_file_variant('PASSWORD_FILE', tmp.name) is None
    True
    """

    if not file_path:
        return None
    try:
        content = Path(file_path).read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        log_debug("env_file_unreadable", env_var=env_var_name, path=file_path, error=str(exc))
        return None
    log_debug("env_file_loaded", env_var=env_var_name, path=file_path, size=len(content))
    return content or None
