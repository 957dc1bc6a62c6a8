"""Environment variable naming.

Purpose
-------
Turn a configuration property path into the environment variable name that
sets it. The transformation is pure: it depends only on the path segments and
the naming options.

Contents
--------
* :func:`split_words` – camelCase/number aware word splitting.
* :func:`transform_property_name` – ``snake_case`` or ``SCREAMING_SNAKE_CASE``.
* :func:`get_env_var_name` – join a whole path, honouring the prefix.
* :func:`get_env_var_name_prefix` – name of a parent path plus separator.
"""

from __future__ import annotations

import re
from typing import Final, Sequence

from ..domain.path import NamedSegment, PathSegment
from .ports import NamingOptions

# Letter runs and digit runs; anything else separates words.
_RUN_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^\W\d_]+|\d+")


def split_words(name: str) -> list[str]:
    """Split *name* into words at case changes, digit runs and punctuation.

    Letters of any script count; caseless letters (CJK and the like) never
    start a new word on their own.

    Examples
    --------
    >>> split_words('camelCasedPropertyName')
    ['camel', 'Cased', 'Property', 'Name']
    >>> split_words('XMLHttpRequest2')
    ['XML', 'Http', 'Request', '2']
    >>> split_words('secret-code_value')
    ['secret', 'code', 'value']
    >>> split_words('портСервера')
    ['порт', 'Сервера']
    """

    words: list[str] = []
    for run in _RUN_PATTERN.findall(name):
        words.extend(_split_case_run(run))
    return words


def _split_case_run(run: str) -> list[str]:
    # Break before an upper-case letter that follows a non upper-case one
    # (camelCase), or that starts a capitalised word after an acronym (XMLHttp).
    words: list[str] = []
    start = 0
    for index in range(1, len(run)):
        previous, current = run[index - 1], run[index]
        following = run[index + 1 : index + 2]
        if current.isupper() and (not previous.isupper() or following.islower()):
            words.append(run[start:index])
            start = index
    words.append(run[start:])
    return words


def transform_property_name(name: str, options: NamingOptions) -> str:
    """Render a declared property name in the configured case style.

    Examples
    --------
    >>> from lib_schema_env_config.domain.options import ArrayOverrideOptions, EnvVarNamingOptions
    >>> transform_property_name('prop2', ArrayOverrideOptions())
    'prop_2'
    >>> transform_property_name('everyProp2', EnvVarNamingOptions())
    'EVERY_PROP_2'
    >>> transform_property_name('名前', EnvVarNamingOptions())
    '名前'
    >>> transform_property_name('$', ArrayOverrideOptions())
    '$'
    """

    # A name without letters or digits is used as declared.
    snake = "_".join(word.lower() for word in split_words(name)) or name
    if options.case == "snake_case":
        return snake
    return snake.upper()


def get_env_var_name(path: Sequence[PathSegment], options: NamingOptions) -> str:
    """Join *path* into an environment variable name.

    Named segments are case-transformed; discovered names and meta markers are
    used verbatim.

    Examples
    --------
    >>> from lib_schema_env_config.domain.options import EnvVarNamingOptions
    >>> from lib_schema_env_config.domain.path import FILE, LiteralSegment, NamedSegment
    >>> path = (NamedSegment('camelCased'), LiteralSegment('fooBar'), FILE)
    >>> get_env_var_name(path, EnvVarNamingOptions())
    'CAMEL_CASED_fooBar_FILE'
    >>> get_env_var_name(path[:1], EnvVarNamingOptions(prefix='APP'))
    'APP_CAMEL_CASED'
    """

    name = options.property_separator.join(_render_segment(segment, options) for segment in path)
    if options.prefix:
        return options.prefix + options.property_separator + name
    return name


def get_env_var_name_prefix(parent_path: Sequence[PathSegment], options: NamingOptions) -> str:
    """Return the leading text shared by every env var below *parent_path*.

    The root path contributes nothing but the configured prefix, so unnamed
    root properties are only discovered among prefixed variables.

    Examples
    --------
    >>> from lib_schema_env_config.domain.options import EnvVarNamingOptions
    >>> get_env_var_name_prefix((), EnvVarNamingOptions())
    ''
    >>> get_env_var_name_prefix((), EnvVarNamingOptions(prefix='APP'))
    'APP_'
    """

    if not parent_path:
        return options.prefix + options.property_separator if options.prefix else ""
    return get_env_var_name(parent_path, options) + options.property_separator


def _render_segment(segment: PathSegment, options: NamingOptions) -> str:
    if isinstance(segment, NamedSegment):
        return transform_property_name(segment.value, options)
    return segment.value
