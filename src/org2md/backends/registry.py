#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/backends/registry.py
"""Backend registry and derivation.

This module implements the registry of export backends. Backends are
declarative records; a derived backend supplies only the translators it
overrides and falls back to its parent chain for everything else.

Resolution rules
----------------
- Translators: precedence, not merge. The first backend in the chain
  (child first) defining a kind wins; parents are never called as a
  super-call.
- Options: precedence on key, child first.
- Filters: merged along the chain, child's filters first, then the
  parent's.

Examples
--------
Derive a backend overriding a single translator:

    >>> from org2md.backends import backend_registry
    >>> backend_registry.define_derived_backend(
    ...     "loud-md", "md", translators={"bold": lambda node, contents, ctx: contents.upper()}
    ... )
    >>> backend_registry.resolve_handler("loud-md", "italic") is backend_registry.resolve_handler("md", "italic")
    True

Notes
-----
The preferred access pattern is the global ``backend_registry`` instance.
Instantiating :class:`BackendRegistry` returns the same singleton; tests
that need a clean slate use :meth:`BackendRegistry.create_isolated`.

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from org2md.backends.base import (
    TRANSLATOR_KEYS,
    Backend,
    Filter,
    OptionSpec,
    is_valid_stage,
    normalize_filters,
)
from org2md.exceptions import (
    ConfigurationError,
    DerivationCycleError,
    MissingTranslatorError,
    UnknownBackendError,
)

logger = logging.getLogger(__name__)

BackendRef = Union[str, Backend]


class BackendRegistry:
    """Registry of named export backends.

    This singleton class holds every defined backend and answers the
    derivation queries the transcoder needs:

    - handler lookup along the derivation chain
    - option default lookup along the chain
    - filter collection along the chain
    - completeness checks before an export starts

    The built-in ``html`` and ``md`` backends are registered lazily on
    first access.

    """

    _instance: Optional[BackendRegistry] = None
    _backends: dict[str, Backend]
    _initialized: bool
    _load_builtins: bool

    def __new__(cls) -> BackendRegistry:
        """Create or return singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._backends = {}
            cls._instance._initialized = False
            cls._instance._load_builtins = True
        return cls._instance

    @classmethod
    def create_isolated(cls, with_builtins: bool = False) -> BackendRegistry:
        """Create a registry that is not the process-wide singleton.

        Parameters
        ----------
        with_builtins : bool, default False
            Register the built-in ``html`` and ``md`` backends on first access

        Returns
        -------
        BackendRegistry
            A fresh, independent registry

        """
        instance = super().__new__(cls)
        instance._backends = {}
        instance._initialized = False
        instance._load_builtins = with_builtins
        return instance

    def _ensure_initialized(self) -> None:
        """Register built-in backends on first use."""
        if self._initialized:
            return
        self._initialized = True
        if not self._load_builtins:
            return
        from org2md.backends import html, markdown

        html.register(self)
        markdown.register(self)
        logger.debug(f"Registered built-in backends: {', '.join(sorted(self._backends))}")

    # ------------------------------------------------------------------
    # Definition
    # ------------------------------------------------------------------

    def define_backend(
        self,
        name: str,
        parent: Optional[str] = None,
        translators: Optional[Mapping[str, Callable[..., Any]]] = None,
        filters: Optional[Mapping[str, Union[Sequence[Filter], Filter]]] = None,
        options: Iterable[OptionSpec] = (),
        *,
        description: str = "",
        replace: bool = False,
    ) -> Backend:
        """Define and register a backend.

        Parameters
        ----------
        name : str
            Unique backend name
        parent : str, optional
            Parent backend name; must already be registered
        translators : mapping, optional
            Node kind (or "inner-template"/"template") to translator
        filters : mapping, optional
            Stage to filter or sequence of filters
        options : iterable of OptionSpec
            Options declared by the backend
        description : str
            Short description
        replace : bool, default False
            Allow redefining an existing name

        Returns
        -------
        Backend
            The registered record

        Raises
        ------
        ConfigurationError
            If the name is taken, a translator key is not a node kind or a
            filter stage is unknown
        UnknownBackendError
            If ``parent`` is not registered
        DerivationCycleError
            If the definition would make the chain loop

        """
        self._ensure_initialized()
        if not name:
            raise ConfigurationError("Backend name must be a non-empty string")
        if name in self._backends and not replace:
            raise ConfigurationError(f"Backend '{name}' is already defined", backend_name=name)

        translators = dict(translators or {})
        unknown = sorted(key for key in translators if key not in TRANSLATOR_KEYS)
        if unknown:
            raise ConfigurationError(
                f"Backend '{name}' defines translators for unknown node kinds: {', '.join(unknown)}",
                backend_name=name,
            )

        normalized_filters = normalize_filters(filters)
        bad_stages = sorted(stage for stage in normalized_filters if not is_valid_stage(stage))
        if bad_stages:
            raise ConfigurationError(
                f"Backend '{name}' defines filters for unknown stages: {', '.join(bad_stages)}",
                backend_name=name,
            )

        if parent is not None:
            if parent not in self._backends:
                raise UnknownBackendError(parent, list(self._backends))
            self._check_acyclic(name, parent)

        backend = Backend(
            name=name,
            parent=parent,
            translators=translators,
            filters=normalized_filters,
            options=tuple(options),
            description=description,
        )
        if name in self._backends:
            logger.warning(f"Backend '{name}' already registered, overwriting")
        self._backends[name] = backend
        logger.debug(f"Registered backend: {name}" + (f" (derived from {parent})" if parent else ""))
        return backend

    def define_derived_backend(
        self,
        name: str,
        parent: str,
        translators: Optional[Mapping[str, Callable[..., Any]]] = None,
        filters: Optional[Mapping[str, Union[Sequence[Filter], Filter]]] = None,
        options: Iterable[OptionSpec] = (),
        *,
        description: str = "",
        replace: bool = False,
    ) -> Backend:
        """Define a backend deriving from ``parent``.

        Only the translators given here are overridden; every other kind
        resolves through ``parent``'s chain.

        """
        if not parent:
            raise ConfigurationError("A derived backend needs a parent", backend_name=name)
        return self.define_backend(
            name,
            parent=parent,
            translators=translators,
            filters=filters,
            options=options,
            description=description,
            replace=replace,
        )

    def unregister(self, name: str) -> None:
        """Remove a backend.

        Raises
        ------
        UnknownBackendError
            If no backend has that name
        ConfigurationError
            If another backend derives from it

        """
        self._ensure_initialized()
        if name not in self._backends:
            raise UnknownBackendError(name, list(self._backends))
        children = sorted(b.name for b in self._backends.values() if b.parent == name)
        if children:
            raise ConfigurationError(
                f"Cannot remove backend '{name}': {', '.join(children)} derive from it", backend_name=name
            )
        del self._backends[name]
        logger.debug(f"Unregistered backend: {name}")

    def _check_acyclic(self, name: str, parent: str) -> None:
        chain = [name]
        current: Optional[str] = parent
        while current is not None:
            chain.append(current)
            if current == name:
                raise DerivationCycleError(name, chain)
            backend = self._backends.get(current)
            current = backend.parent if backend is not None else None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_backend(self, backend: BackendRef) -> Backend:
        """Return the backend record for a name (or the record itself).

        Raises
        ------
        UnknownBackendError
            If the name is not registered

        """
        self._ensure_initialized()
        if isinstance(backend, Backend):
            return backend
        try:
            return self._backends[backend]
        except KeyError:
            raise UnknownBackendError(backend, list(self._backends)) from None

    def has_backend(self, name: str) -> bool:
        """Return True if ``name`` is registered."""
        self._ensure_initialized()
        return name in self._backends

    def list_backends(self) -> list[str]:
        """Return the registered backend names, sorted."""
        self._ensure_initialized()
        return sorted(self._backends)

    def chain(self, backend: BackendRef) -> list[Backend]:
        """Return the derivation chain, the backend itself first.

        Raises
        ------
        UnknownBackendError
            If a backend or one of its ancestors is not registered
        DerivationCycleError
            If the chain loops

        """
        record = self.get_backend(backend)
        result = [record]
        seen = {record.name}
        while record.parent is not None:
            if record.parent in seen:
                raise DerivationCycleError(result[0].name, [b.name for b in result] + [record.parent])
            record = self.get_backend(record.parent)
            seen.add(record.name)
            result.append(record)
        return result

    def chain_names(self, backend: BackendRef) -> list[str]:
        """Return the names along the derivation chain, child first."""
        return [b.name for b in self.chain(backend)]

    def find_handler(self, backend: BackendRef, kind: str) -> Optional[Callable[..., Any]]:
        """Return the first translator for ``kind`` along the chain, or None."""
        for record in self.chain(backend):
            translator = record.own_translator(kind)
            if translator is not None:
                return translator
        return None

    def resolve_handler(self, backend: BackendRef, kind: str) -> Callable[..., Any]:
        """Return the translator for ``kind``, child's table first.

        Raises
        ------
        MissingTranslatorError
            If no backend in the chain defines ``kind``

        """
        translator = self.find_handler(backend, kind)
        if translator is None:
            names = self.chain_names(backend)
            raise MissingTranslatorError(names[0], kind, names)
        return translator

    def all_translators(self, backend: BackendRef) -> dict[str, Callable[..., Any]]:
        """Return the flattened translator table, child precedence."""
        merged: dict[str, Callable[..., Any]] = {}
        for record in reversed(self.chain(backend)):
            merged.update(record.translators)
        return merged

    def all_filters(self, backend: BackendRef, stage: str) -> list[Filter]:
        """Return the filters for ``stage``: child's first, then each parent's."""
        result: list[Filter] = []
        for record in self.chain(backend):
            result.extend(record.filters.get(stage, ()))
        return result

    def all_options(self, backend: BackendRef) -> dict[str, OptionSpec]:
        """Return option specs keyed by option key, child precedence."""
        merged: dict[str, OptionSpec] = {}
        for record in reversed(self.chain(backend)):
            for spec in record.options:
                merged[spec.key] = spec
        return merged

    def resolve_option(self, backend: BackendRef, key: str, default: Any = None) -> Any:
        """Return the default of option ``key`` as resolved along the chain."""
        spec = self.all_options(backend).get(key)
        return spec.default if spec is not None else default

    def known_option_keys(self) -> set[str]:
        """Return every option key declared by any registered backend."""
        self._ensure_initialized()
        keys: set[str] = set()
        for record in self._backends.values():
            keys.update(spec.key for spec in record.options)
        return keys

    def check_backend(self, backend: BackendRef, kinds: Iterable[str]) -> None:
        """Verify that every kind resolves to a translator.

        Raises
        ------
        MissingTranslatorError
            For the first kind (in sorted order) without a translator

        """
        for kind in sorted(set(kinds)):
            self.resolve_handler(backend, kind)


backend_registry = BackendRegistry()

__all__ = ["BackendRegistry", "backend_registry"]
