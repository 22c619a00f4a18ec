import logging

from sqlalchemy.orm import Session

from carledger.models.system_settings_model import SystemSetting
from carledger.utils.loan_calculations import PaidOffPrecedence

logger = logging.getLogger(__name__)

PAID_OFF_PRECEDENCE_KEY = "loan_paid_off_precedence"

# key -> (default value, description)
DEFAULT_SETTINGS = {
    PAID_OFF_PRECEDENCE_KEY: (
        PaidOffPrecedence.EITHER.value,
        "Which paid-off signal wins: EITHER, BALANCE or SCHEDULE",
    ),
}


def get_setting(db: Session, key: str, default: str) -> str:
    row = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    return row.value if row else default


def validate_setting_value(key: str, value: str) -> str:
    """Normalized value for known keys; raises ValueError when it is not allowed."""
    if key == PAID_OFF_PRECEDENCE_KEY:
        return PaidOffPrecedence(value.strip().upper()).value
    return value


def get_paid_off_precedence(db: Session) -> PaidOffPrecedence:
    raw = get_setting(db, PAID_OFF_PRECEDENCE_KEY, PaidOffPrecedence.EITHER.value)
    try:
        return PaidOffPrecedence(raw.strip().upper())
    except ValueError:
        logger.warning("invalid %s=%r, falling back to EITHER", PAID_OFF_PRECEDENCE_KEY, raw)
        return PaidOffPrecedence.EITHER
