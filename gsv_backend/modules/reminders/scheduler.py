import asyncio
import logging
from gsv_backend.config import settings
from gsv_backend.database.supabase_client import get_service_supabase
from gsv_backend.modules.reminders.service import RemindersService

logger = logging.getLogger(__name__)


async def send_due_reminders() -> int:
    """Deliver every reminder that is due within the lookahead window."""
    try:
        service = RemindersService(get_service_supabase())
        sent = service.process_scheduled_reminders()
        if not sent:
            logger.debug("No due reminders found")
        return sent
    except Exception as e:
        logger.error(f"Error in reminder scheduler: {str(e)}")
        return 0


async def reminder_scheduler_loop():
    """Background task that periodically delivers scheduled reminders"""
    while True:
        try:
            await send_due_reminders()
        except Exception as e:
            logger.error(f"Error in reminder scheduler loop: {str(e)}")

        await asyncio.sleep(settings.reminder_poll_interval_seconds)
