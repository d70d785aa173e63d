"""Router modules for FastAPI web API."""

from web.routers import config, health, history, hosts, prefs, profiles, trash

__all__ = ["config", "health", "history", "hosts", "prefs", "profiles", "trash"]
