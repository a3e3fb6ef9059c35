# -*- coding: utf-8 -*-
"""urivalue.

An immutable URI value type. Strings are validated against a URI grammar that also accepts host-less routing
identifiers (``{host}/path/{id}``, ``container/path``), components are derived from the validated string on access,
and modified copies are produced with the ``with_*`` methods.

The package comes in three parts:
    * The value type itself, :class:`urivalue.Uri`, with its grammar and component extraction.
    * A SQLAlchemy column type, :class:`urivalue.database.URI`, for persisting Uri values.
    * The command line interface (CLI) tool for inspecting and checking URIs.
"""

from importlib import metadata

from .errors import InvalidUriError
from .uri import Uri

try:
    __version__: str = metadata.version("urivalue")
except metadata.PackageNotFoundError:
    # Running from a source tree that has not been installed
    __version__: str = "0.0.0"

__all__ = ['Uri', 'InvalidUriError', '__version__']
