# apps/api/src/domains/scheduled_checks/service.py
import logging
from datetime import datetime, timezone

from src.core.database import Database, StoreError

logger = logging.getLogger(__name__)

# Result key -> database routine
SCHEDULED_CHECKS: tuple[tuple[str, str], ...] = (
    ("expiring_contracts", "check_expiring_contracts"),
    ("contract_renewals", "check_contract_renewals"),
    ("action_plan_deadlines", "check_action_plan_deadlines"),
    ("stalled_cards", "check_stalled_cards"),
    ("clients_without_contact", "check_clients_without_contact"),
    ("okr_deadlines", "check_okr_deadlines"),
    ("training_notifications", "check_training_notifications"),
    ("pending_ads_documentation", "check_pending_ads_documentation"),
    ("pending_comercial_documentation", "check_pending_comercial_documentation"),
    ("no_clients_moved", "check_no_clients_moved_today"),
    ("stalled_onboarding", "check_stalled_onboarding"),
    ("pending_approvals", "check_pending_approvals"),
    ("creative_awaiting_approval", "check_creative_awaiting_approval"),
    ("overdue_deliveries", "check_overdue_deliveries"),
)


async def run_scheduled_checks(db: Database) -> dict[str, bool]:
    """
    Run every notification-generating routine once.

    Each routine is isolated: a failure is logged and reported as False
    without stopping the remaining checks.
    """
    results: dict[str, bool] = {}
    for key, routine in SCHEDULED_CHECKS:
        try:
            await db.rpc(routine)
            results[key] = True
        except StoreError as e:
            logger.error(f"Error running {routine}: {e.message}")
            results[key] = False

    failed = [key for key, ok in results.items() if not ok]
    if failed:
        logger.warning(f"Scheduled checks finished with failures: {', '.join(failed)}")
    else:
        logger.info("Scheduled checks finished")
    return results


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
