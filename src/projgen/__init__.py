"""
projgen - project generator CLI.

Scaffolds new projects from built-in templates. Every invocation first
resolves its flags (conflicts, generation mode, output level) into an
immutable run configuration before any command logic runs.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core.errors import ConflictError, ProjgenError, ValidationError

__version__ = get_version()

__all__ = [
    "__version__",
    "ProjgenError",
    "ConflictError",
    "ValidationError",
]
