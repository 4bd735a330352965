from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from leavedesk.config import Settings, get_settings
from leavedesk.db import create_store
from leavedesk.models.base import _now_utc
from leavedesk.seed import seed_demo_data
from leavedesk.services.employee import EmployeeService
from leavedesk.services.leave import LeaveService

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from leavedesk.db import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class LeaveDesk:
    """The two services wired to one shared store."""

    settings: Settings
    store: KeyValueStore
    employees: EmployeeService
    leaves: LeaveService


def setup_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")


def create_app(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    clock: Callable[[], datetime] = _now_utc,
) -> LeaveDesk:
    """Application factory.

    Builds the store once and passes it explicitly into both services. The
    leave service talks to the roster only through the directory it is given.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if store is None:
        store = create_store(settings.storage_url)

    employees = EmployeeService(store, settings, clock=clock)
    leaves = LeaveService(store, employees, settings, clock=clock)

    logger.info("Starting %s v%s [%s]", settings.app_name, settings.app_version, settings.environment)

    if settings.seed_demo_data:
        seed_demo_data(employees)

    return LeaveDesk(settings=settings, store=store, employees=employees, leaves=leaves)
