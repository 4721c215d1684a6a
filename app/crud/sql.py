"""
SQL fragment builders shared by the CRUD modules.

Both builders emit PostgreSQL positional placeholders ($1, $2, ...) and hand
back the values to bind alongside them. Column names come from code, never
from the request; request data only ever travels as bound values.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

from app.core.exceptions import BadRequestError


@dataclass(frozen=True)
class SqlFragment:
    """A piece of SQL plus the values for its placeholders, in order."""
    sql: str
    values: List[Any] = field(default_factory=list)


class Predicate(NamedTuple):
    """
    One WHERE condition.

    `template` holds a single `{}` where the placeholder goes, e.g.
    "salary >= {}".
    """
    field: str
    template: str
    value: Any


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    js_to_sql: Optional[Dict[str, str]] = None
) -> SqlFragment:
    """
    Build the SET list for a single-row partial update.

    Args:
        data_to_update: Field name -> new value. None is a value to write.
        js_to_sql: Field name -> column name, for fields whose column differs

    Returns:
        SqlFragment whose sql is e.g. '"first_name"=$1, "age"=$2' and whose
        values follow the same order

    Raises:
        BadRequestError: If there is nothing to update
    """
    js_to_sql = js_to_sql or {}
    keys = list(data_to_update)
    if not keys:
        raise BadRequestError("No data")

    # {firstName: 'Aliya', age: 32} => ['"first_name"=$1', '"age"=$2']
    cols = [f'"{js_to_sql.get(key, key)}"=${idx}' for idx, key in enumerate(keys, start=1)]

    return SqlFragment(sql=", ".join(cols), values=[data_to_update[key] for key in keys])


def sql_for_filters(predicates: Iterable[Predicate], start: int = 1) -> SqlFragment:
    """
    Render predicates as a WHERE clause joined with AND.

    Placeholders are numbered from `start` in the order given. No predicates
    gives an empty clause.
    """
    predicates = list(predicates)
    if not predicates:
        return SqlFragment(sql="", values=[])

    clauses = [p.template.format(f"${idx}") for idx, p in enumerate(predicates, start=start)]
    return SqlFragment(sql="WHERE " + " AND ".join(clauses), values=[p.value for p in predicates])


def contains_pattern(value: str) -> str:
    """
    LIKE pattern matching `value` anywhere, with its own % and _ taken literally.

    Use with an ESCAPE '\\' clause.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def check_employee_range(min_employees: Optional[int], max_employees: Optional[int]) -> None:
    """Reject a minimum employee count above the maximum."""
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("Invalid parameters: minEmployees cannot be greater than maxEmployees")
