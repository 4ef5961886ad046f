"""
API Version 1 module.

Contains the v1 endpoints for authentication, the tenant registry and the
tenant-scoped resources.
"""

from hms.api.v1.router import router

__all__ = ["router"]
