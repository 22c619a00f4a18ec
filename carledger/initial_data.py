import logging

from sqlalchemy.orm import Session

from carledger.models.system_settings_model import SystemSetting
from carledger.utils.database import SessionLocal
from carledger.utils.settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


def seed_settings(db: Session) -> int:
    """Insert missing default settings; existing values are left alone."""
    created = 0
    for key, (value, description) in DEFAULT_SETTINGS.items():
        if db.query(SystemSetting).filter(SystemSetting.key == key).first():
            continue
        db.add(SystemSetting(key=key, value=value, description=description))
        created += 1

    if created:
        db.commit()
    return created


def init_seed() -> None:
    db = SessionLocal()
    try:
        created = seed_settings(db)
        logger.info("seeded %d default setting(s)", created)
    finally:
        db.close()
