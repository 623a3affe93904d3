"""
Shared query builders for the repository classes.

Partial updates are expressed as an ordered sequence of ``(column, value)``
pairs.  The generated SET clause follows that order exactly, so the SQL text
for a given input is always the same.
"""
from typing import Any, Sequence

from sqlalchemy import Update, update

from social_network.models import utcnow

FieldValues = Sequence[tuple[str, Any]]


def build_update_statement(model, entity_id: str, fields: FieldValues, flag: str) -> Update:
    """
    Return ``UPDATE <model> SET <fields...> WHERE id = :id AND <flag> = false``.

    *flag* names the soft-delete column of *model* (``deleted`` or
    ``removed``).  Raises ``ValueError`` for an empty field list or for a
    column that *model* does not have; ``id`` and *flag* themselves can never
    be set through this path.
    """
    if not fields:
        raise ValueError("At least one field is required for an update")

    columns = model.__table__.c
    pairs = []
    for name, value in fields:
        if name not in columns or name in ("id", flag):
            raise ValueError(f"Column {name!r} cannot be updated on {model.__tablename__}")
        pairs.append((getattr(model, name), value))

    return (
        update(model)
        .where(model.id == entity_id, getattr(model, flag).is_(False))
        .ordered_values(*pairs)
        .execution_options(synchronize_session=False)
    )


def page_offset(page: int, page_size: int) -> int:
    """SQL OFFSET for a 1-based *page*."""
    return (page - 1) * page_size


def build_soft_delete_statement(model, entity_id: str, flag: str) -> Update:
    """Return ``UPDATE <model> SET <flag> = true, updated_at = now WHERE id = :id AND <flag> = false``."""
    values = {flag: True}
    if "updated_at" in model.__table__.c:
        values["updated_at"] = utcnow()
    return (
        update(model)
        .where(model.id == entity_id, getattr(model, flag).is_(False))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
