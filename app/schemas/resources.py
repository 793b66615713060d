from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high"]
ServiceRequestStatus = Literal["new", "in_progress", "resolved", "rejected"]

ROLE_CODE_PATTERN = r"^[A-Z0-9_]+$"
ROLE_NAME_PATTERN = r"^[a-zA-Z0-9_\-\s]+$"


class _RecordPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class _RecordPatch(_RecordPayload):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True, extra="forbid"
    )


class TodoCreate(_RecordPayload):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    priority: Priority
    completed: bool = False


class TodoUpdate(_RecordPatch):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    priority: Optional[Priority] = None
    completed: Optional[bool] = None


class RoleCreate(_RecordPayload):
    role_name: str = Field(min_length=1, max_length=100)
    role_code: str = Field(min_length=1, max_length=50, pattern=ROLE_CODE_PATTERN)
    description: Optional[str] = Field(default=None, max_length=500)
    permissions: list[str] = []
    is_active: bool = True


class RoleUpdate(_RecordPatch):
    role_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    permissions: Optional[list[str]] = None
    is_active: Optional[bool] = None


class PermissionCreate(_RecordPayload):
    module: str = Field(min_length=1, max_length=100)
    permissions: list[str] = Field(min_length=1)
    description: Optional[str] = Field(default=None, max_length=500)


class PermissionUpdate(_RecordPatch):
    module: Optional[str] = Field(default=None, min_length=1, max_length=100)
    permissions: Optional[list[str]] = None
    description: Optional[str] = Field(default=None, max_length=500)


class RoleMappingCreate(_RecordPayload):
    role_name: str = Field(min_length=1, max_length=100, pattern=ROLE_NAME_PATTERN)
    role_code: str = Field(min_length=1, max_length=50, pattern=ROLE_CODE_PATTERN)
    tenant_id: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    priority: int = Field(default=50, ge=0, le=100)


class RoleMappingUpdate(_RecordPatch):
    role_code: Optional[str] = Field(default=None, min_length=1, max_length=50, pattern=ROLE_CODE_PATTERN)
    tenant_id: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    priority: Optional[int] = Field(default=None, ge=0, le=100)


class ContactInfo(_RecordPayload):
    email: Optional[str] = None
    phone: Optional[str] = None


class ServiceRequestCreate(_RecordPayload):
    request_type: str = Field(min_length=1, max_length=80)
    description: str = Field(min_length=1, max_length=2000)
    requested_by: str = Field(min_length=1, max_length=200)
    status: ServiceRequestStatus = "new"
    priority: Priority = "medium"
    contact: Optional[ContactInfo] = None
    tags: list[str] = []


class ServiceRequestUpdate(_RecordPatch):
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    status: Optional[ServiceRequestStatus] = None
    priority: Optional[Priority] = None
    contact: Optional[ContactInfo] = None
    tags: Optional[list[str]] = None


class LookupCreate(_RecordPayload):
    category: str = Field(min_length=1, max_length=80)
    sub_category: Optional[str] = Field(default=None, max_length=80)
    code: str = Field(min_length=1, max_length=80)
    label: str = Field(min_length=1, max_length=200)
    is_active: bool = True
    sort_order: int = 0


class LookupUpdate(_RecordPatch):
    sub_category: Optional[str] = Field(default=None, max_length=80)
    label: Optional[str] = Field(default=None, min_length=1, max_length=200)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
