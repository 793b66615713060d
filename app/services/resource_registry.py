from __future__ import annotations

from datetime import datetime, timezone

from app.schemas.collection import SortSpec
from app.schemas.resources import (
    LookupCreate,
    LookupUpdate,
    PermissionCreate,
    PermissionUpdate,
    RoleCreate,
    RoleMappingCreate,
    RoleMappingUpdate,
    RoleUpdate,
    ServiceRequestCreate,
    ServiceRequestUpdate,
    TodoCreate,
    TodoUpdate,
)
from app.services.record_stats import average_of, count_since, count_where, sum_of
from app.services.resource_config import ResourceConfig

TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


def _month_start() -> datetime:
    now = datetime.now(timezone.utc)
    return datetime(now.year, now.month, 1, tzinfo=timezone.utc)


def _pending(items: list[dict]) -> int:
    return len(items) - count_where("completed", True)(items)


RESOURCE_CONFIGS: dict[str, ResourceConfig] = {
    "todos": ResourceConfig(
        name="todos",
        label="todos",
        id_prefix="TODO",
        allowed_search_fields=("title", "description", "priority"),
        allowed_sort_fields=("title", "priority", "completed", *TIMESTAMP_FIELDS),
        allowed_filter_fields=("priority", "completed"),
        stats_group_fields=("priority",),
        stats_breakdown_fields=("priority", "completed"),
        stats_derived={"completed": count_where("completed", True), "pending": _pending},
        create_schema=TodoCreate,
        update_schema=TodoUpdate,
    ),
    "roles": ResourceConfig(
        name="roles",
        label="roles",
        id_prefix="ROLE",
        allowed_search_fields=("roleName", "roleCode", "description"),
        allowed_sort_fields=("roleName", "roleCode", "isActive", *TIMESTAMP_FIELDS),
        allowed_filter_fields=("roleCode", "isActive"),
        stats_group_fields=("isActive",),
        stats_derived={"active": count_where("isActive", True), "permissionsAssigned": sum_of("permissions")},
        create_schema=RoleCreate,
        update_schema=RoleUpdate,
    ),
    "permissions": ResourceConfig(
        name="permissions",
        label="permissions",
        id_prefix="PERMISSION",
        allowed_search_fields=("module", "permissions", "description"),
        allowed_sort_fields=("module", *TIMESTAMP_FIELDS),
        allowed_filter_fields=("module",),
        default_sort=SortSpec(field="module", direction="asc"),
        stats_group_fields=("module",),
        stats_derived={"totalPermissions": sum_of("permissions")},
        create_schema=PermissionCreate,
        update_schema=PermissionUpdate,
    ),
    "role-mappings": ResourceConfig(
        name="role-mappings",
        label="role-mappings",
        id_prefix="ROLEMAPPING",
        allowed_search_fields=("roleName", "roleCode", "description", "tenantId"),
        allowed_sort_fields=("roleName", "roleCode", "priority", "isActive", *TIMESTAMP_FIELDS),
        allowed_filter_fields=("roleCode", "tenantId", "isActive", "priority"),
        stats_group_fields=("isActive", "roleCode"),
        stats_breakdown_fields=("roleCode", "tenantId"),
        stats_derived={"active": count_where("isActive", True), "averagePriority": average_of("priority")},
        create_schema=RoleMappingCreate,
        update_schema=RoleMappingUpdate,
    ),
    "service-requests": ResourceConfig(
        name="service-requests",
        label="service-requests",
        id_prefix="SR",
        allowed_search_fields=("requestType", "description", "status", "priority", "requestedBy", "tags"),
        allowed_sort_fields=("requestType", "status", "priority", "requestedBy", *TIMESTAMP_FIELDS),
        allowed_filter_fields=("status", "priority", "requestType"),
        stats_group_fields=("status",),
        stats_breakdown_fields=("status", "priority", "requestType"),
        stats_derived={
            "createdThisMonth": count_since("createdAt", _month_start),
            "updatedThisMonth": count_since("updatedAt", _month_start),
        },
        create_schema=ServiceRequestCreate,
        update_schema=ServiceRequestUpdate,
    ),
    "lookups": ResourceConfig(
        name="lookups",
        label="lookups",
        id_prefix="LOOKUP",
        allowed_search_fields=("category", "subCategory", "code", "label"),
        allowed_sort_fields=("category", "code", "label", "sortOrder", *TIMESTAMP_FIELDS),
        allowed_filter_fields=("category", "subCategory", "isActive"),
        default_sort=SortSpec(field="sortOrder", direction="asc"),
        stats_group_fields=("category",),
        stats_breakdown_fields=("category", "isActive"),
        stats_derived={"active": count_where("isActive", True)},
        create_schema=LookupCreate,
        update_schema=LookupUpdate,
    ),
}


def get_resource_config(name: str) -> ResourceConfig:
    normalized = str(name or "").strip().lower().replace("_", "-")
    config = RESOURCE_CONFIGS.get(normalized)
    if config is None:
        raise KeyError(name)
    return config
