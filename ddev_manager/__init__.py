"""
DDEV Manager.

- backend/: FastAPI service that wraps the ddev CLI, config cache, realtime events
- cli/: Terminal client for the dashboard API (Typer + Rich)
"""
