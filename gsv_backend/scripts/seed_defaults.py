"""
Seed Default Settings Script
Creates the procurement/international settings rows and the supported
languages a fresh database needs. Existing rows are left untouched, so the
script is safe to run on every deploy.
"""

from gsv_backend.database.supabase_client import get_service_supabase
from gsv_backend.modules.admin_settings.schemas import DEFAULT_PROCUREMENT_SETTINGS
from gsv_backend.modules.admin_settings.service import DEFAULT_INTERNATIONAL_SETTINGS
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = [
    {"code": "en", "name": "English", "native_name": "English", "is_active": True, "is_default": True},
    {"code": "es", "name": "Spanish", "native_name": "Español", "is_active": True, "is_default": False},
    {"code": "zh", "name": "Chinese", "native_name": "中文", "is_active": False, "is_default": False},
]


def seed_settings_row(supabase: Client, table: str, defaults: dict) -> bool:
    """Insert the single settings row if the table is empty"""
    existing = supabase.table(table).select("id").limit(1).execute()
    if existing.data:
        logger.info(f"{table} already configured, skipping")
        return False
    supabase.table(table).insert(defaults).execute()
    logger.info(f"{table} seeded with defaults")
    return True


def seed_languages(supabase: Client) -> int:
    logger.info("Seeding supported languages...")
    created_count = 0
    for language in DEFAULT_LANGUAGES:
        try:
            existing = supabase.table("supported_languages")\
                .select("code")\
                .eq("code", language["code"])\
                .execute()
            if existing.data:
                logger.debug(f"Language exists: {language['code']}")
                continue
            supabase.table("supported_languages").insert(language).execute()
            created_count += 1
        except Exception as e:
            logger.error(f"Error processing language {language['code']}: {e}")
    logger.info(f"Languages seeded: {created_count} created")
    return created_count


def main():
    supabase = get_service_supabase()
    seed_settings_row(supabase, "procurement_settings", DEFAULT_PROCUREMENT_SETTINGS)
    seed_settings_row(supabase, "international_settings", DEFAULT_INTERNATIONAL_SETTINGS)
    seed_languages(supabase)
    logger.info("Seeding complete")


if __name__ == "__main__":
    main()
