"""
Background scheduler: runs periodic jobs inside the FastAPI process.

Jobs:
  - Pending payment verification (every 30 seconds)
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(daemon=True)


def _run_payment_verification():
    from app.infrastructure.db.session import get_session_factory
    from app.application.payments import verify_pending_payments

    Session = get_session_factory()
    db = Session()
    try:
        resolved = verify_pending_payments(db)
        if resolved:
            logger.info("Verified %s pending payment(s)", resolved)
    except Exception:
        logger.exception("Payment verification job failed")
    finally:
        db.close()


def start_scheduler():
    """Start the background scheduler with all periodic jobs."""
    scheduler.add_job(
        _run_payment_verification,
        "interval",
        seconds=30,
        id="payment_verification",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started: payment_verification (every 30 s)")


def shutdown_scheduler():
    """Gracefully stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
