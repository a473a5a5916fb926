import logging
from staffdesk.database import SessionLocal
from staffdesk.services.policy_service import PolicyService

logger = logging.getLogger(__name__)


def init_system_data():
    """
    Makes sure the company policy row exists so check-ins can be classified
    from the first request on.
    """
    db = SessionLocal()
    try:
        policy = PolicyService(db).get_policy()
        logger.info(
            f"Company policy in effect: {policy.office_start_time}-{policy.office_end_time}, "
            f"grace {policy.grace_minutes} min"
        )
    finally:
        db.close()
