"""Reporting bounded context: scheduled business-metric reports.

Merchants schedule recurring reports (daily, weekly, monthly or every N
days). A timer scans for due reports, regenerates their content from the
merchant's conversation, order and customer metrics, delivers them by email
and/or messaging, and reschedules them.
"""

from protean.domain import Domain
from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

reporting = Domain(name="reporting")
