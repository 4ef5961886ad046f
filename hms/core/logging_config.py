"""
Logging configuration
"""

import logging
import logging.config

from hms.config import Settings
from hms.core.tenancy import current_tenant_id


class TenantContextFilter(logging.Filter):
    """Attach the current request's tenant to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.tenant_id = current_tenant_id.get() or "-"
        return True


def configure_logging(settings: Settings) -> None:
    """Configure root and library loggers from settings."""
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "tenant": {"()": TenantContextFilter},
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-8s [%(tenant_id)s] %(name)s: %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "filters": ["tenant"],
            },
        },
        "root": {
            "handlers": ["console"],
            "level": settings.log_level,
        },
        "loggers": {
            "sqlalchemy.engine": {"level": "INFO" if settings.debug else "WARNING"},
            "botocore": {"level": "WARNING"},
            "alembic": {"level": "INFO"},
        },
    })
