"""Entity package: Role."""

from .table import RoleTable, UserRoleTable

__all__ = ["RoleTable", "UserRoleTable"]
