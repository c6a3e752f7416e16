# File: villa_admin/core/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
import logging

from villa_admin.core.config import settings

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()

def start_scheduler():
    """Start all scheduled jobs"""
    from villa_admin.services.calendar_maintenance import run_daily_calendar_maintenance

    try:
        # Keep the rolling calendar window populated and repair drift once a day
        scheduler.add_job(
            run_daily_calendar_maintenance,
            trigger=CronTrigger(hour=settings.CALENDAR_MAINTENANCE_HOUR, minute=0),
            id='calendar_maintenance',
            name='Populate calendar window and reconcile reservations',
            replace_existing=True
        )

        scheduler.start()
        logger.info("Scheduler started successfully")
        logger.info(f"Active jobs: {len(scheduler.get_jobs())}")
    except Exception as e:
        logger.error(f"Failed to start scheduler: {e}")

def stop_scheduler():
    """Stop scheduler gracefully"""
    if not scheduler.running:
        return
    try:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
    except Exception as e:
        logger.error(f"Error stopping scheduler: {e}")
