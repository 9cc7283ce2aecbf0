"""
CLI Client Module.

Terminal dashboard built with Typer for communicating with the backend API.

Architecture:
- CLI is a thin presentation layer
- All business logic lives in the backend
- CLI calls backend via HTTP (httpx)
- Sends X-Frontend-ID: cli header for log routing

Usage:
    python dashboard.py --help
    python dashboard.py projects list
    python dashboard.py health status
"""
