"""
CRUD operations for companies.

All SQL for the companies table lives here. Records are returned as dicts
keyed by the API field names: handle, name, description, numEmployees,
logoUrl.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import query
from app.core.exceptions import BadRequestError, NotFoundError
from app.crud.job import jobs_for_company
from app.crud.sql import Predicate, check_employee_range, contains_pattern, sql_for_filters, sql_for_partial_update
from app.schemas.company import CompanyCreateRequest, CompanyFilters

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'

JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def filter_predicates(filters: CompanyFilters) -> List[Predicate]:
    """
    Turn company list filters into WHERE predicates.

    Checked in order: name, minEmployees, maxEmployees.

    Raises:
        BadRequestError: If minEmployees is greater than maxEmployees
    """
    check_employee_range(filters.min_employees, filters.max_employees)

    predicates = []
    if filters.name is not None:
        predicates.append(Predicate("name", "LOWER(name) LIKE LOWER({}) ESCAPE '\\'", contains_pattern(filters.name)))
    if filters.min_employees is not None:
        predicates.append(Predicate("minEmployees", "num_employees >= {}", filters.min_employees))
    if filters.max_employees is not None:
        predicates.append(Predicate("maxEmployees", "num_employees <= {}", filters.max_employees))
    return predicates


def _handle_exists(db: Session, handle: str) -> bool:
    rows = query(db, "SELECT handle FROM companies WHERE handle = $1", [handle])
    return bool(rows)


def create(db: Session, company_data: CompanyCreateRequest) -> Dict[str, Any]:
    """
    Create a new company.

    Args:
        db: Database session
        company_data: Validated company creation data

    Returns:
        The created company

    Raises:
        BadRequestError: If the handle is already taken
    """
    handle = company_data.handle
    if _handle_exists(db, handle):
        raise BadRequestError(f"Duplicate company: {handle}")

    try:
        rows = query(
            db,
            f"""INSERT INTO companies
               (handle, name, description, num_employees, logo_url)
               VALUES ($1, $2, $3, $4, $5)
               RETURNING {COMPANY_COLUMNS}""",
            [handle, company_data.name, company_data.description,
             company_data.num_employees, company_data.logo_url],
        )
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same handle
        db.rollback()
        if _handle_exists(db, handle):
            raise BadRequestError(f"Duplicate company: {handle}")
        raise

    logger.info(f"Created company {handle}")
    return rows[0]


def find_all(db: Session, filters: Optional[CompanyFilters] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered.

    Args:
        db: Database session
        filters: Optional name / employee-count filters

    Returns:
        List of companies
    """
    where = sql_for_filters(filter_predicates(filters or CompanyFilters()))

    return query(
        db,
        f"""SELECT {COMPANY_COLUMNS}
           FROM companies
           {where.sql}
           ORDER BY name""",
        where.values,
    )


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company and a summary of its jobs.

    Returns:
        The company with a `jobs` list of {id, title, salary, equity, company_handle}

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = query(
        db,
        f"""SELECT {COMPANY_COLUMNS}
           FROM companies
           WHERE handle = $1""",
        [handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    company = rows[0]
    company["jobs"] = jobs_for_company(db, handle)
    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company.

    Only the fields present in `data` change. Accepted keys: name,
    description, numEmployees, logoUrl.

    Returns:
        The updated company

    Raises:
        BadRequestError: If `data` is empty
        NotFoundError: If no company has this handle
    """
    set_cols = sql_for_partial_update(data, JS_TO_SQL)
    handle_idx = f"${len(set_cols.values) + 1}"

    rows = query(
        db,
        f"""UPDATE companies
           SET {set_cols.sql}
           WHERE handle = {handle_idx}
           RETURNING {COMPANY_COLUMNS}""",
        [*set_cols.values, handle],
    )
    if not rows:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (its jobs go with it).

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = query(
        db,
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    )
    if not rows:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Deleted company {handle}")
