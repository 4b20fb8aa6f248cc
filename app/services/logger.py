import json
import logging
from datetime import datetime

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("medrecord.ai")


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging once; safe to call again under Uvicorn reload."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)

    # third-party clients are chatty at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)


def log_debug(event: str, data: dict):
    """
    Logs structured debug info if AI_DEBUG_MODE is enabled.
    """
    if not settings.AI_DEBUG_MODE:
        return

    entry = {
        "timestamp": datetime.now().isoformat(),
        "event": event,
        "data": data,
    }

    logger.info("[AI DEBUG] %s:\n%s", event, json.dumps(entry, indent=2, default=str))
