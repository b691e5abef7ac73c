"""
Acting user as supplied by the identity provider
"""
from pydantic import BaseModel
from enum import Enum


class UserRole(str, Enum):
    """Roles known to the maintenance desk"""
    TENANT = "tenant"
    STAFF = "staff"
    MANAGER = "manager"


class Actor(BaseModel):
    """
    Identity of the user performing an operation.

    The value is trusted as-is; verifying it is the identity provider's job.
    """
    id: str
    role: UserRole

    class Config:
        frozen = True

    @property
    def is_tenant(self) -> bool:
        return self.role == UserRole.TENANT

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER
