"""Public auth exports for asdeploy."""

from __future__ import annotations

from .credentials import ManagementCredentials

__all__ = ["ManagementCredentials"]
