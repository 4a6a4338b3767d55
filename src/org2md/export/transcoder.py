#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/transcoder.py
"""Post-order transcoder.

The transcoder turns a document tree into a string for one backend. Each
node's children are transcoded first; their results, concatenated in
document order, form the ``contents`` passed to the node's translator.

Layout rules applied around translator results:

- an ignored node produces the empty string
- a None result produces the empty string, with no trailing whitespace
- an element result is normalized to end with exactly one newline and is
  followed by ``post_blank`` blank lines
- an object result is followed by ``post_blank`` spaces

Results are memoized per (backend, node), so a secondary string exported
twice (e.g., a headline title in the body and in the ToC) is transcoded
once per backend.

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from org2md.ast.nodes import GREATER_ELEMENTS, LEAF_KINDS, Node
from org2md.ast.utils import walk
from org2md.exceptions import LinkResolutionError, Org2MdError, TranscodingError
from org2md.export.context import ExportContext
from org2md.export.filters import apply_filters, filter_chain, run_filters
from org2md.export.text import normalize_string
from org2md.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


class Transcoder:
    """Dispatch nodes to translators along a backend's derivation chain.

    Parameters
    ----------
    ctx : ExportContext
        Context of the export; the transcoder attaches itself to it so
        translators can call ``ctx.export_data``

    """

    def __init__(self, ctx: ExportContext):
        """Attach to ``ctx`` and create empty memo tables."""
        self.ctx = ctx
        ctx.transcoder = self
        self._memo: dict[tuple[str, Node], str] = {}
        self._handlers: dict[tuple[str, str], Optional[Callable[..., Any]]] = {}
        self._kind_filters: dict[str, list[Any]] = {}

    def _handler(self, backend: str, kind: str) -> Callable[..., Any]:
        key = (backend, kind)
        if key not in self._handlers:
            self._handlers[key] = self.ctx.registry.resolve_handler(backend, kind)
        return self._handlers[key]  # type: ignore[return-value]

    def _filters_for(self, kind: str) -> list[Any]:
        if kind not in self._kind_filters:
            self._kind_filters[kind] = filter_chain(kind, self.ctx)
        return self._kind_filters[kind]

    def export_data(self, data: Union[Node, list[Node], None], backend: Optional[str] = None) -> str:
        """Transcode a node, or a list of nodes such as a secondary string.

        Parameters
        ----------
        data : Node, list of Node or None
            What to transcode
        backend : str, optional
            Backend name; defaults to the export backend

        Returns
        -------
        str
            Transcoded text, empty for None or ignored nodes

        """
        backend_name = backend or self.ctx.backend_name
        if data is None:
            return ""
        if isinstance(data, list):
            return "".join(self.export_data(item, backend_name) for item in data)

        key = (backend_name, data)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        if self.ctx.is_ignored(data):
            result = ""
        else:
            result = self._transcode(data, backend_name)
        self._memo[key] = result
        return result

    def _contents(self, node: Node, backend: str) -> Optional[str]:
        if node.kind in LEAF_KINDS or not node.children:
            return None
        is_root = node is self.ctx.tree
        parts = []
        for child in node.children:
            if is_root:
                self.ctx.check_cancelled()
            parts.append(self.export_data(child, backend))
        contents = "".join(parts)
        if node.kind in GREATER_ELEMENTS:
            contents = normalize_string(contents)
        return contents

    def _transcode(self, node: Node, backend: str) -> str:
        contents = self._contents(node, backend)

        if node.kind == "document":
            translator = self.ctx.registry.find_handler(backend, "document")
            if translator is None:
                return contents or ""
        else:
            translator = self._handler(backend, node.kind)

        try:
            result = translator(node, contents, self.ctx)
        except LinkResolutionError as exc:
            if node.kind != "link":
                raise
            result = self._broken_link(node, contents, exc, backend)
        except Org2MdError:
            raise
        except Exception as exc:
            raise TranscodingError(
                f"Failed to transcode {node.kind} with backend '{backend}': {exc}",
                kind=node.kind,
                backend_name=backend,
                original_error=exc,
            ) from exc

        if result is None:
            return ""
        if node.kind == "document":
            return result

        if node.is_object:
            result = result + " " * node.post_blank
        else:
            result = normalize_string(result) + "\n" * node.post_blank

        filters = self._filters_for(node.kind)
        if filters:
            result = run_filters(filters, result, self.ctx)
        return result

    def _broken_link(
        self, link: Node, contents: Optional[str], exc: LinkResolutionError, backend: str
    ) -> Optional[str]:
        """Render a link whose destination cannot be found."""
        mode = self.ctx.get("with_broken_links", True)
        path = exc.link_path or str(link.get("raw_link") or link.get("path", ""))
        if mode == "mark":
            return self.export_data(Node("plain-text", {"value": f"[BROKEN LINK: {path}]"}), backend)
        if not mode:
            logger.debug(f"Dropping broken link: {path}")
            return None
        logger.warning(f"Unable to resolve link: {path}")
        if contents:
            return contents
        return self.export_data(Node("plain-text", {"value": str(link.get("raw_link") or path)}), backend)


def exported_kinds(ctx: ExportContext) -> set[str]:
    """Return the node kinds the export will dispatch, document excluded."""
    kinds = {node.kind for node in walk(ctx.tree, skip=ctx.is_ignored)}
    kinds.discard("document")
    return kinds


def export_document(ctx: ExportContext, body_only: bool = False) -> str:
    """Run the transcoding stages of one export.

    The body is transcoded first, which fills the footnote and numbering
    caches; the ``inner-template`` translator then adds document-level
    parts (ToC, footnote section) and ``template`` wraps the result.

    Parameters
    ----------
    ctx : ExportContext
        Context with options, tree and ignore set ready
    body_only : bool, default False
        Skip the ``template`` translator

    Returns
    -------
    str
        The exported document

    """
    transcoder = ctx.transcoder or Transcoder(ctx)
    registry = ctx.registry

    with debug_timer(logger, f"Transcoding with backend '{ctx.backend_name}'"):
        body = normalize_string(transcoder.export_data(ctx.tree))

    inner_template = registry.find_handler(ctx.backend, "inner-template")
    full_body = inner_template(body, ctx) if inner_template is not None else body
    full_body = apply_filters("body", full_body, ctx)

    template = registry.find_handler(ctx.backend, "template")
    if body_only or template is None:
        output = full_body
    else:
        output = template(full_body, ctx)

    return apply_filters("final-output", output, ctx)


__all__ = ["Transcoder", "exported_kinds", "export_document"]
