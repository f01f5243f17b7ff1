import logging, os
from datetime import datetime

logger = logging.getLogger("goonline")

def init(config=None) -> None:
    if logger.handlers:
        return
    level = getattr(logging, (getattr(config, "log_level", None) or "INFO").upper(), logging.INFO)
    logger.setLevel(logging.DEBUG)

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(ch)

    log_dir = os.path.expanduser(getattr(config, "log_dir", None) or "~/.config/goonline/logs")
    os.makedirs(log_dir, exist_ok=True)
    fh = logging.FileHandler(os.path.join(log_dir, f"goonline_{datetime.now():%Y%m%d}.log"))
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(fh)

    logger.info("GoOnline logging initialized")
