"""FastAPI web application for SweetHosts.

This module provides the HTTP API that mirrors the core operations of
the CLI. All business logic is delegated to core modules in sweethosts/.
"""

from web.app import app, create_app

__all__ = ["app", "create_app"]
