"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules: ``core`` (configuration, logging, database, errors and
pagination), ``schemas`` (pydantic models), ``services`` (storage and
business rules) and ``api`` (versioned HTTP routes).
"""

from .main import app  # noqa: F401
