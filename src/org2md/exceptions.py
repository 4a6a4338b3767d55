#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the org2md library.

This module defines specialized exception classes for the error conditions
that can occur while parsing Org documents and transcoding them through a
backend.

Exception Hierarchy
-------------------
- Org2MdError (base exception)

  - ValidationError (user supplied option validation)

  - ConfigurationError (backend definitions, fatal before any output)
    - UnknownBackendError (no backend registered under a name)
    - MissingTranslatorError (no handler for a node kind in the derivation chain)
    - DerivationCycleError (a backend derives from itself)

  - ParsingError (Org input parsing failures)

  - TranscodingError (a handler failed while exporting)

  - LinkResolutionError (a link could not be resolved, recovered locally)

  - ExportCancelledError (host requested cancellation)

  - FileError (file access and I/O)
    - OutputWriteError (file write failures)

  - DependencyError (missing packages)

"""

from __future__ import annotations

from typing import Any


class Org2MdError(Exception):
    """Base exception class for all org2md-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Org2MdError):
    """Exception raised for invalid user options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigurationError(Org2MdError):
    """Exception raised for invalid backend configuration.

    Configuration errors are fatal and are reported before any output
    is produced.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    backend_name : str, optional
        Name of the backend involved
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, backend_name: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, original_error=original_error)
        self.backend_name = backend_name


class UnknownBackendError(ConfigurationError):
    """Exception raised when a backend name is not registered.

    Parameters
    ----------
    backend_name : str
        The name that could not be found
    available : list of str, optional
        Names of the registered backends

    """

    def __init__(self, backend_name: str, available: list[str] | None = None):
        """Initialize with the unknown name and the registered alternatives."""
        message = f"Unknown backend '{backend_name}'"
        if available:
            message += f". Available backends: {', '.join(sorted(available))}"
        super().__init__(message, backend_name=backend_name)
        self.available = available or []


class MissingTranslatorError(ConfigurationError):
    """Exception raised when no handler exists for a node kind.

    The lookup walks the whole derivation chain before this is raised.

    Parameters
    ----------
    backend_name : str
        Backend whose chain was searched
    kind : str
        Node kind without a handler
    chain : list of str, optional
        The derivation chain that was searched, child first

    """

    def __init__(self, backend_name: str, kind: str, chain: list[str] | None = None):
        """Initialize with the backend, kind and the searched chain."""
        chain = chain or [backend_name]
        message = f"No translator for '{kind}' in backend '{backend_name}' (searched: {' -> '.join(chain)})"
        super().__init__(message, backend_name=backend_name)
        self.kind = kind
        self.chain = chain


class DerivationCycleError(ConfigurationError):
    """Exception raised when a backend derivation chain loops.

    Parameters
    ----------
    backend_name : str
        Backend being defined or resolved
    chain : list of str
        The chain up to and including the repeated name

    """

    def __init__(self, backend_name: str, chain: list[str]):
        """Initialize with the cyclic chain."""
        super().__init__(f"Backend derivation cycle: {' -> '.join(chain)}", backend_name=backend_name)
        self.chain = chain


class ParsingError(Org2MdError):
    """Exception raised when Org input cannot be parsed.

    Parameters
    ----------
    message : str
        Description of the parsing error
    parsing_stage : str, optional
        Stage where parsing failed (e.g., "outline", "body")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class TranscodingError(Org2MdError):
    """Exception raised when a handler fails during export.

    A failing handler aborts the whole export; there is no per-node recovery.

    Parameters
    ----------
    message : str
        Description of the failure
    kind : str, optional
        Node kind whose handler failed
    backend_name : str, optional
        Backend being exported to
    original_error : Exception, optional
        The exception raised by the handler

    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        backend_name: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the transcoding error with node details."""
        super().__init__(message, original_error=original_error)
        self.kind = kind
        self.backend_name = backend_name


class LinkResolutionError(Org2MdError):
    """Exception raised when a link target cannot be found.

    Handlers recover from this locally by rendering the link as plain text.

    Parameters
    ----------
    message : str
        Description of the failure
    link_path : str, optional
        The path that could not be resolved

    """

    def __init__(self, message: str, link_path: str | None = None):
        """Initialize with the unresolved path."""
        super().__init__(message)
        self.link_path = link_path


class ExportCancelledError(Org2MdError):
    """Exception raised when the host cancels an export in progress."""

    def __init__(self, message: str = "Export cancelled"):
        """Initialize the cancellation error."""
        super().__init__(message)


class FileError(Org2MdError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the file that caused the error
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path information."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class OutputWriteError(FileError):
    """Exception raised when output cannot be written.

    Parameters
    ----------
    file_path : str
        Path that could not be written
    message : str, optional
        Custom error message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        if message is None:
            message = f"Failed to write output file: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class DependencyError(Org2MdError):
    """Exception raised when a required package is missing.

    Parameters
    ----------
    converter_name : str
        Component that needs the dependencies
    missing_packages : list of tuple
        (package name, version spec) pairs that are missing
    message : str, optional
        Custom error message
    original_error : Exception, optional
        The original ImportError

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the dependency error."""
        if message is None:
            names = " ".join(f"{pkg}{spec}" for pkg, spec in missing_packages)
            message = f"{converter_name} requires missing packages. Install with: pip install {names}"
        super().__init__(message, original_error=original_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages


__all__ = [
    "Org2MdError",
    "ValidationError",
    "ConfigurationError",
    "UnknownBackendError",
    "MissingTranslatorError",
    "DerivationCycleError",
    "ParsingError",
    "TranscodingError",
    "LinkResolutionError",
    "ExportCancelledError",
    "FileError",
    "OutputWriteError",
    "DependencyError",
]
