import logging
import sys

from salary_api.config import settings


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # sklearn/joblib chatter is noise at INFO.
    logging.getLogger("joblib").setLevel(logging.WARNING)
