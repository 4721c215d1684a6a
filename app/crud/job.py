"""
CRUD operations for Job model.

All SQL for the jobs table lives here. Records are returned as dicts with
the keys id, title, salary, equity, company_handle; equity is always a
decimal string ("0", "0.25") or None.
"""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import query
from app.core.exceptions import BadRequestError, NotFoundError
from app.crud.sql import Predicate, check_employee_range, contains_pattern, sql_for_filters, sql_for_partial_update
from app.schemas.job import JobCreateRequest, JobFilters

logger = logging.getLogger(__name__)

JOB_COLUMNS = "id, title, salary, equity, company_handle"

# Largest value a PostgreSQL integer column can hold
MAX_JOB_ID = 2_147_483_647


def _to_db(value: Any) -> Any:
    # Numeric values are bound as text; the database casts them on compare/insert
    if isinstance(value, Decimal):
        return str(value)
    return value


def _to_record(row: Dict[str, Any]) -> Dict[str, Any]:
    equity = row.get("equity")
    if equity is not None:
        row["equity"] = str(equity)
    return row


def _parse_id(job_id: Union[int, str]) -> int:
    """A key that is not a valid job id names no job."""
    try:
        parsed = int(job_id)
    except (TypeError, ValueError):
        raise NotFoundError(f"No job with id: {job_id}")
    if not 0 < parsed <= MAX_JOB_ID:
        raise NotFoundError(f"No job with id: {job_id}")
    return parsed


def filter_predicates(filters: JobFilters) -> List[Predicate]:
    """
    Turn job list filters into WHERE predicates.

    Checked in order: title, minSalary, hasEquity, company_handle.
    hasEquity only applies when it is exactly "true".

    Raises:
        BadRequestError: If minEmployees is greater than maxEmployees
    """
    check_employee_range(filters.min_employees, filters.max_employees)

    predicates = []
    if filters.title is not None:
        predicates.append(Predicate("title", "LOWER(title) LIKE LOWER({}) ESCAPE '\\'", contains_pattern(filters.title)))
    if filters.min_salary is not None:
        predicates.append(Predicate("minSalary", "salary >= {}", filters.min_salary))
    if filters.has_equity == "true":
        predicates.append(Predicate("hasEquity", "equity > {}", 0))
    if filters.company_handle is not None:
        predicates.append(Predicate("company_handle", "company_handle = {}", filters.company_handle))
    return predicates


def dupe_check(db: Session, job_data: JobCreateRequest) -> None:
    """
    Raise BadRequestError if an identical posting already exists.

    Identical means same title, salary, equity and company_handle.
    """
    rows = query(
        db,
        """SELECT id
           FROM jobs
           WHERE title = $1 AND salary = $2 AND equity = $3 AND company_handle = $4""",
        [job_data.title, job_data.salary, _to_db(job_data.equity), job_data.company_handle],
    )
    if rows:
        raise BadRequestError("Duplicate Error, job already exists")


def create(db: Session, job_data: JobCreateRequest) -> Dict[str, Any]:
    """
    Create a new job in the database.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created job including its generated id

    Raises:
        BadRequestError: If the same posting already exists
    """
    dupe_check(db, job_data)

    try:
        rows = query(
            db,
            f"""INSERT INTO jobs
               (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)
               RETURNING {JOB_COLUMNS}""",
            [job_data.title, job_data.salary, _to_db(job_data.equity), job_data.company_handle],
        )
        db.commit()
    except IntegrityError:
        # A concurrent insert may have won; report it as the duplicate it is
        db.rollback()
        dupe_check(db, job_data)
        raise

    job = _to_record(rows[0])
    logger.info(f"Created job {job['id']}: {job['title']} at {job['company_handle']}")
    return job


def find_all(db: Session, filters: Optional[JobFilters] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title, optionally filtered.

    Args:
        db: Database session
        filters: Optional title / salary / equity / company filters

    Returns:
        List of jobs
    """
    where = sql_for_filters(filter_predicates(filters or JobFilters()))

    rows = query(
        db,
        f"""SELECT {JOB_COLUMNS}
           FROM jobs
           {where.sql}
           ORDER BY title""",
        where.values,
    )
    return [_to_record(row) for row in rows]


def jobs_for_company(db: Session, company_handle: str) -> List[Dict[str, Any]]:
    """All jobs at one company, ordered by id."""
    rows = query(
        db,
        f"""SELECT {JOB_COLUMNS}
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [company_handle],
    )
    return [_to_record(row) for row in rows]


def get(db: Session, job_id: Union[int, str]) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = query(
        db,
        f"""SELECT {JOB_COLUMNS}
           FROM jobs
           WHERE id = $1""",
        [_parse_id(job_id)],
    )
    if not rows:
        raise NotFoundError(f"No job with id: {job_id}")

    return _to_record(rows[0])


def update(db: Session, job_id: Union[int, str], data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Only the fields present in `data` change. Accepted keys: title, salary,
    equity, company_handle.

    Returns:
        The updated job

    Raises:
        BadRequestError: If `data` is empty or the result would duplicate another posting
        NotFoundError: If no job has this id
    """
    parsed_id = _parse_id(job_id)
    set_cols = sql_for_partial_update({key: _to_db(value) for key, value in data.items()})
    id_idx = f"${len(set_cols.values) + 1}"

    try:
        rows = query(
            db,
            f"""UPDATE jobs
               SET {set_cols.sql}
               WHERE id = {id_idx}
               RETURNING {JOB_COLUMNS}""",
            [*set_cols.values, parsed_id],
        )
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Cannot update job {job_id}: conflicting job data")

    if not rows:
        db.rollback()
        raise NotFoundError(f"No job with id: {job_id}")

    db.commit()
    logger.info(f"Updated job {parsed_id}: {', '.join(data)}")
    return _to_record(rows[0])


def remove(db: Session, job_id: Union[int, str]) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = query(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [_parse_id(job_id)],
    )
    if not rows:
        db.rollback()
        raise NotFoundError(f"No job with id: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
