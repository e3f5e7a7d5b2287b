"""Query string and OData filter encoding.

Example:
    >>> encode_query_params({"offset": 0, "limit": 20, "filter": None})
    [('offset', '0'), ('limit', '20')]
    >>> build_odata_filter(status="COMPLETED", title_contains="O'Brien")
    "status eq 'COMPLETED' and contains(title, 'O''Brien')"
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

QueryValue = str | int | float | bool | None


def _stringify(value: str | int | float | bool) -> str:
    match value:
        case bool(): return "true" if value else "false"
        case float() if value.is_integer(): return str(int(value))
        case _: return str(value)


def encode_query_params(params: Mapping[str, QueryValue] | None) -> list[tuple[str, str]]:
    """Drop absent values and stringify the rest, preserving insertion order."""
    if not params:
        return []
    return [(key, _stringify(value)) for key, value in params.items() if value is not None]


def build_odata_filter(
    *,
    status: str | None = None,
    title_contains: str | None = None,
    created_at_from: str | None = None,
    created_at_to: str | None = None,
    label_ids: Sequence[str] | None = None,
) -> str | None:
    """Join the present criteria into one ``filter`` expression.

    Clauses are joined with `` and `` in a fixed order (status, title,
    created-from, created-to, labels). Returns None rather than an empty string
    when no criterion is set; empty strings and empty label lists count as unset.
    """
    clauses: list[str] = []
    if status:
        clauses.append(f"status eq '{status}'")
    if title_contains:
        escaped = title_contains.replace("'", "''")
        clauses.append(f"contains(title, '{escaped}')")
    if created_at_from:
        clauses.append(f"createdAt ge '{created_at_from}'")
    if created_at_to:
        clauses.append(f"createdAt le '{created_at_to}'")
    if label_ids:
        ids = ", ".join(f"'{label_id}'" for label_id in label_ids)
        clauses.append(f"labelIds in ({ids})")
    return " and ".join(clauses) if clauses else None
