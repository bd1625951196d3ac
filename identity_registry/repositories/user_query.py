from typing import List, Optional
from sqlalchemy import or_
from identity_registry.core.config import SORTABLE_FIELDS, DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION
from identity_registry.core.exceptions import BadRequestError
from identity_registry.models.user import User

FILTERABLE_FIELDS = {
    "is_deleted":     User.is_deleted,
    "email":          User.email,
    "primary_mobile": User.primary_mobile,
    "created_by":     User.created_by,
}


def active_criteria(criteria: Optional[dict] = None) -> dict:
    """Hide soft-deleted users unless the caller already filters on is_deleted."""
    criteria = dict(criteria or {})
    criteria.setdefault("is_deleted", False)
    return criteria


def build_conditions(criteria: dict) -> List:
    conditions = []
    for key, value in criteria.items():
        column = FILTERABLE_FIELDS.get(key)
        if column is None:
            raise BadRequestError(f"Cannot filter users by '{key}'", field=key)
        if key == "is_deleted":
            conditions.append(column.is_(bool(value)))
        else:
            conditions.append(column == value)
    return conditions


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_condition(term: str):
    pattern = f"%{_escape_like(term)}%"
    return or_(
        User.name.ilike(pattern, escape="\\"),
        User.email.ilike(pattern, escape="\\"),
    )


def build_order_by(sort_field: Optional[str] = None, sort_direction: Optional[str] = None) -> List:
    if sort_field not in SORTABLE_FIELDS:
        sort_field, sort_direction = DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION
    column = getattr(User, sort_field)
    if sort_direction == "asc":
        return [column.asc(), User.id.asc()]
    return [column.desc(), User.id.desc()]
