"""Demo roster for a fresh store.

Run with:  python -m leavedesk.seed
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from leavedesk.schemas import Failure

if TYPE_CHECKING:
    from leavedesk.services.employee import EmployeeService

logger = logging.getLogger(__name__)

DEMO_EMPLOYEES = [
    {
        "name": "Sarah Johnson",
        "email": "admin@company.com",
        "department": "HR",
        "joining_date": "2023-01-15",
        "role": "hr",
    },
    {
        "name": "John Smith",
        "email": "john@company.com",
        "department": "Engineering",
        "joining_date": "2023-03-01",
        "role": "employee",
    },
    {
        "name": "Emily Davis",
        "email": "emily@company.com",
        "department": "Marketing",
        "joining_date": "2023-02-10",
        "role": "employee",
    },
]


def seed_demo_data(directory: EmployeeService) -> int:
    """Create the demo employees when the roster is empty. Returns how many were created."""
    existing = directory.list_employees()
    if isinstance(existing, Failure):
        logger.error("Skipping demo data: %s", existing.error)
        return 0
    if existing.data:
        return 0

    created = 0
    for payload in DEMO_EMPLOYEES:
        result = directory.create_employee(payload)
        if isinstance(result, Failure):
            logger.error("Failed to seed %s: %s", payload["email"], result.to_envelope())
            continue
        created += 1

    logger.info("Seeded %d demo employee(s)", created)
    return created


def main() -> int:
    """Seed the configured store and report the result."""
    from leavedesk.main import create_app

    app = create_app()
    listing = app.employees.list_employees()
    if isinstance(listing, Failure):
        print(f"Failed to read employees: {listing.error}")
        return 1
    for employee in listing.data:
        print(f"  {employee.name} <{employee.email}> [{employee.role}] balance={employee.leave_balance}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
