#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/context.py
"""Export context.

An :class:`ExportContext` is created at the start of one export and
discarded at its end. Translators read resolved options from it as from a
read-only mapping. The engine-maintained caches (node references, footnote
order, headline numbering) are only reachable through accessor methods,
so translators never write them directly.

A context must not be shared between concurrent exports; each export
builds its own.

"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping, Optional, Union

from org2md.ast.nodes import Node
from org2md.constants import REFERENCE_PREFIX, REFERENCE_WIDTH
from org2md.exceptions import ExportCancelledError

if TYPE_CHECKING:
    from org2md.backends.base import Backend
    from org2md.backends.registry import BackendRegistry
    from org2md.export.transcoder import Transcoder

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class ExportContext(Mapping[str, Any]):
    """Resolved options plus per-export caches.

    Parameters
    ----------
    options : mapping
        Resolved option values; copied and exposed read-only
    backend : Backend
        Backend being exported to
    registry : BackendRegistry
        Registry used to resolve handlers along the derivation chain
    tree : Node
        Root of the (copied) document being exported
    cancel_check : callable, optional
        Polled before each direct child of the root; returning True aborts
        the export with :class:`~org2md.exceptions.ExportCancelledError`

    Examples
    --------
    >>> ctx["with_toc"]
    True
    >>> ctx.get_reference(headline)
    'org0000001'

    """

    def __init__(
        self,
        options: Mapping[str, Any],
        backend: Backend,
        registry: BackendRegistry,
        tree: Node,
        cancel_check: Optional[CancelCheck] = None,
    ):
        """Freeze the option map and create empty caches."""
        self._options = MappingProxyType(dict(options))
        self.backend = backend
        self.registry = registry
        self.tree = tree
        self.cancel_check = cancel_check
        self.ignored: set[Node] = set()
        self.transcoder: Optional[Transcoder] = None
        # Engine caches
        self._references: dict[Node, str] = {}
        self._reference_counter = 0
        self._cache: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Mapping protocol (read-only options)
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        """Return an option value."""
        return self._options[key]

    def __iter__(self) -> Iterator[str]:
        """Iterate over option keys."""
        return iter(self._options)

    def __len__(self) -> int:
        """Return the number of options."""
        return len(self._options)

    @property
    def options(self) -> Mapping[str, Any]:
        """Read-only view of the resolved options."""
        return self._options

    @property
    def backend_name(self) -> str:
        """Name of the backend being exported to."""
        return self.backend.name

    def backend_chain(self) -> list[str]:
        """Names along the export backend's derivation chain, child first."""
        return self.registry.chain_names(self.backend)

    # ------------------------------------------------------------------
    # Scope
    # ------------------------------------------------------------------

    def is_ignored(self, node: Node) -> bool:
        """Return True when ``node`` is outside the export scope."""
        return node in self.ignored

    def check_cancelled(self) -> None:
        """Raise if the host requested cancellation."""
        if self.cancel_check is not None and self.cancel_check():
            logger.info("Export cancelled by host")
            raise ExportCancelledError()

    # ------------------------------------------------------------------
    # Cache accessors
    # ------------------------------------------------------------------

    def get_reference(self, node: Node) -> str:
        """Return the stable reference of ``node``, assigning one on first use.

        References are ``org`` followed by seven hex digits, numbered
        sequentially within the export.

        """
        reference = self._references.get(node)
        if reference is None:
            self._reference_counter += 1
            reference = f"{REFERENCE_PREFIX}{self._reference_counter:0{REFERENCE_WIDTH}x}"
            self._references[node] = reference
        return reference

    def cached(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cache entry ``key``, computing it once."""
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]

    # ------------------------------------------------------------------
    # Transcoding
    # ------------------------------------------------------------------

    def export_data(self, data: Union[Node, list[Node], None], backend: Optional[str] = None) -> str:
        """Transcode a node or a secondary string.

        Parameters
        ----------
        data : Node or list of Node
            What to export
        backend : str, optional
            Export with another backend (e.g., the ToC entry backend);
            defaults to the current one

        """
        if self.transcoder is None:
            raise RuntimeError("ExportContext is not attached to a transcoder")
        return self.transcoder.export_data(data, backend)

    def with_backend(self, backend: str, node: Node, contents: Optional[str] = None) -> Optional[str]:
        """Call ``backend``'s translator for ``node`` with already transcoded contents."""
        translator = self.registry.resolve_handler(backend, node.kind)
        return translator(node, contents, self)


__all__ = ["ExportContext", "CancelCheck"]
