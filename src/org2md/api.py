#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/api.py
"""Public export API for org2md.

This module exposes the entry points used by the command line and by
embedding applications: :func:`export_as` transcodes a document tree with
a named backend, :func:`export_to_string` parses Org input first, and
:func:`export_file` / :func:`export_files` write results to disk.

Examples
--------
Export an Org string to Markdown:

    >>> from org2md import export_to_string
    >>> export_to_string("* Intro\\nSome *bold* text.")
    '# Intro\\n\\nSome **bold** text.\\n'

Export one subtree of a parsed document:

    >>> from org2md import OrgParser, export_as
    >>> doc = OrgParser().parse(Path("notes.org"))
    >>> export_as(doc, "md", subtree=doc.children[1], body_only=True)

"""

from __future__ import annotations

import copy
import logging
from dataclasses import fields
from pathlib import Path
from typing import IO, Any, Mapping, Optional, Sequence, Union

from org2md.ast import builder as b
from org2md.ast.nodes import Node
from org2md.backends.registry import BackendRegistry, backend_registry
from org2md.exceptions import FileError, OutputWriteError
from org2md.export.context import CancelCheck, ExportContext
from org2md.export.filters import apply_filters, validate_user_filters
from org2md.export.options import resolve_options
from org2md.export.prune import compute_ignored
from org2md.export.transcoder import export_document, exported_kinds
from org2md.options import BaseExportOptions, OrgParserOptions, options_class_for
from org2md.parsers.org import OrgParser
from org2md.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

ExportSource = Union[str, Path, IO[bytes], IO[str], bytes, Node]
OptionsArg = Union[BaseExportOptions, Mapping[str, Any], None]

# Output file extension per backend; derived backends inherit their parent's
BACKEND_EXTENSIONS: dict[str, str] = {
    "md": ".md",
    "html": ".html",
}


def _user_options(options: OptionsArg, backend: str, **kwargs: Any) -> dict[str, Any]:
    """Flatten an options object or mapping (plus kwargs) into the user layer.

    Keyword arguments naming a field of the backend's options class are
    applied on top of ``options``. Unknown keys are left in place so that
    option resolution reports them.

    """
    if options is None:
        user: dict[str, Any] = {}
    elif isinstance(options, BaseExportOptions):
        user = options.to_option_dict()
    else:
        user = dict(options)

    if kwargs:
        option_names = {field.name for field in fields(options_class_for(backend))}
        unknown = [key for key in kwargs if key not in option_names]
        if unknown:
            logger.debug(f"Passing non-dataclass export options through: {unknown}")
        user.update(kwargs)

    validate_user_filters(user.get("filters"))
    return user


def _subtree_document(subtree: Node) -> Node:
    """Detach ``subtree`` from its (copied) parent into a new document root."""
    if subtree.parent is not None:
        subtree.parent.remove_child(subtree)
    return b.document(subtree)


def export_extension(backend: str, registry: Optional[BackendRegistry] = None) -> str:
    """Return the output file extension for ``backend``.

    Derived backends without an entry of their own use the extension of
    the nearest ancestor that has one; ``.txt`` is the last resort.

    """
    registry = registry or backend_registry
    for name in registry.chain_names(backend):
        if name in BACKEND_EXTENSIONS:
            return BACKEND_EXTENSIONS[name]
    return ".txt"


def export_as(
    tree: Node,
    backend: str = "md",
    options: OptionsArg = None,
    *,
    subtree: Optional[Node] = None,
    body_only: bool = False,
    cancel_check: Optional[CancelCheck] = None,
    registry: Optional[BackendRegistry] = None,
    **kwargs: Any,
) -> str:
    """Export a document tree with a named backend.

    The caller's tree is deep-copied and never modified; filters and the
    export scope operate on the copy.

    Parameters
    ----------
    tree : Node
        ``document`` root produced by :class:`~org2md.parsers.org.OrgParser`
        or the builder helpers
    backend : str, default "md"
        Registered backend name
    options : ExportOptions or mapping, optional
        User layer of option resolution. Document keywords still override
        these values.
    subtree : Node, optional
        Headline of ``tree`` to export alone. Its ``EXPORT_*`` properties
        override buffer keywords and its title becomes the document title
        unless ``EXPORT_TITLE`` is set.
    body_only : bool, default False
        Skip the ``template`` translator
    cancel_check : callable, optional
        Polled before each top-level child; returning True aborts the
        export with :class:`~org2md.exceptions.ExportCancelledError`
    registry : BackendRegistry, optional
        Registry to resolve the backend from; the process-wide registry
        by default
    kwargs : Any
        Individual export options, applied on top of ``options``

    Returns
    -------
    str
        The exported document

    Raises
    ------
    UnknownBackendError
        If ``backend`` is not registered
    MissingTranslatorError
        If a node kind in scope has no translator along the derivation chain
    ValidationError
        If an option name is not declared by any backend
    TranscodingError
        If a translator fails
    ExportCancelledError
        If ``cancel_check`` requests cancellation

    """
    registry = registry or backend_registry
    backend_record = registry.get_backend(backend)

    memo: dict[int, Any] = {}
    copied = copy.deepcopy(tree, memo)
    mapped = memo.get(id(subtree)) if subtree is not None else None
    if subtree is not None and mapped is None:
        raise ValueError("subtree is not part of the exported tree")

    user = _user_options(options, backend_record.name, **kwargs)
    resolved = resolve_options(registry, backend_record.name, user, tree=copied, subtree=mapped)

    root = copied
    if mapped is not None:
        if "title" not in user and "EXPORT_TITLE" not in mapped.properties:
            resolved["title"] = mapped.get("raw_value")
        root = _subtree_document(mapped)
        logger.debug(f"Exporting subtree '{mapped.get('raw_value')}'")

    ctx = ExportContext(resolved, backend_record, registry, root, cancel_check=cancel_check)
    ctx.ignored = compute_ignored(root, ctx)
    registry.check_backend(backend_record, exported_kinds(ctx))

    filtered = apply_filters("parse-tree", ctx.tree, ctx)
    if filtered is not ctx.tree:
        ctx.tree = filtered
        ctx.ignored = compute_ignored(filtered, ctx)
        registry.check_backend(backend_record, exported_kinds(ctx))

    with debug_timer(logger, f"Export to '{backend_record.name}'"):
        return export_document(ctx, body_only=body_only)


def export_to_string(
    source: ExportSource,
    backend: str = "md",
    options: OptionsArg = None,
    *,
    parser_options: Optional[OrgParserOptions] = None,
    body_only: bool = False,
    cancel_check: Optional[CancelCheck] = None,
    registry: Optional[BackendRegistry] = None,
    **kwargs: Any,
) -> str:
    """Parse Org input (unless already a tree) and export it.

    Parameters
    ----------
    source : str, Path, IO, bytes or Node
        Org text, a path to an Org file, raw bytes, a stream or a parsed
        ``document`` tree
    backend : str, default "md"
        Registered backend name
    options : ExportOptions or mapping, optional
        User layer of option resolution
    parser_options : OrgParserOptions, optional
        Parser configuration (TODO keywords, footnote section title)
    body_only : bool, default False
        Skip the ``template`` translator
    cancel_check : callable, optional
        Cancellation poll, see :func:`export_as`
    registry : BackendRegistry, optional
        Registry to resolve the backend from
    kwargs : Any
        Individual export options

    Returns
    -------
    str
        The exported document

    """
    if isinstance(source, Node):
        tree = source
    else:
        with debug_timer(logger, "Org parsing"):
            tree = OrgParser(parser_options).parse(source)
    return export_as(
        tree,
        backend,
        options,
        body_only=body_only,
        cancel_check=cancel_check,
        registry=registry,
        **kwargs,
    )


def write_output(path: Path, content: str) -> None:
    """Write exported text to ``path`` as UTF-8, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(path), original_error=e) from e


def export_file(
    input_path: Union[str, Path],
    output: Union[str, Path, None] = None,
    backend: str = "md",
    options: OptionsArg = None,
    *,
    parser_options: Optional[OrgParserOptions] = None,
    body_only: bool = False,
    registry: Optional[BackendRegistry] = None,
    **kwargs: Any,
) -> Path:
    """Export an Org file and write the result next to it (or to ``output``).

    The whole document is exported before anything is written, so a failed
    export leaves no partial output file.

    Parameters
    ----------
    input_path : str or Path
        Org file to export
    output : str or Path, optional
        Destination file; defaults to the input path with the backend's
        extension (``notes.org`` -> ``notes.md``)
    backend : str, default "md"
        Registered backend name
    options : ExportOptions or mapping, optional
        User layer of option resolution
    parser_options : OrgParserOptions, optional
        Parser configuration
    body_only : bool, default False
        Skip the ``template`` translator
    registry : BackendRegistry, optional
        Registry to resolve the backend from
    kwargs : Any
        Individual export options

    Returns
    -------
    Path
        The written file

    Raises
    ------
    FileError
        If the input file does not exist
    OutputWriteError
        If the output cannot be written

    """
    source = Path(input_path)
    if not source.is_file():
        raise FileError(f"Input file not found: {source}", file_path=str(source))

    destination = Path(output) if output is not None else source.with_suffix(export_extension(backend, registry))
    kwargs.setdefault("input_file", str(source))
    content = export_to_string(
        source,
        backend,
        options,
        parser_options=parser_options,
        body_only=body_only,
        registry=registry,
        **kwargs,
    )
    write_output(destination, content)
    logger.info(f"Exported {source} -> {destination}")
    return destination


def export_files(
    paths: Sequence[Union[str, Path]],
    output_dir: Union[str, Path, None] = None,
    backend: str = "md",
    options: OptionsArg = None,
    *,
    parser_options: Optional[OrgParserOptions] = None,
    body_only: bool = False,
    registry: Optional[BackendRegistry] = None,
    **kwargs: Any,
) -> list[Path]:
    """Export several Org files as a batch.

    Each ``x.org`` becomes ``x.md`` (or the backend's extension) in
    ``output_dir``, or beside the input when no directory is given, so
    that ``.org`` links rewritten to ``.md`` keep pointing at the exported
    siblings.

    Returns
    -------
    list of Path
        The written files, in input order

    """
    written: list[Path] = []
    extension = export_extension(backend, registry)
    for path in paths:
        source = Path(path)
        destination = Path(output_dir) / (source.stem + extension) if output_dir is not None else None
        written.append(
            export_file(
                source,
                destination,
                backend,
                options,
                parser_options=parser_options,
                body_only=body_only,
                registry=registry,
                **kwargs,
            )
        )
    return written


__all__ = [
    "BACKEND_EXTENSIONS",
    "export_as",
    "export_extension",
    "export_file",
    "export_files",
    "export_to_string",
    "write_output",
]
