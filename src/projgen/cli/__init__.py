"""
projgen CLI Package.

- app.py: root application, global options, command registration
- project.py: generate, validate, audit
- cache.py: cache management sub-app
- config.py: saved configuration sub-app
- version.py: --version flag and version command
- common.py / output.py: shared helpers
"""

from projgen.cli.app import app, main

__all__ = [
    "app",
    "main",
]
