"""Internal controller exports for asdeploy."""

from __future__ import annotations

from .management_controller import ManagementController
from .responses import parse_plan_response

__all__ = ["ManagementController", "parse_plan_response"]
