import logging
import os
from pathlib import Path

from identity_bootstrap.rules.models import Rules

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings:
    """Environment-driven settings. Read once per process."""

    def __init__(self) -> None:
        self.data_dir = Path(os.environ.get("IDB_DATA_DIR", "./data"))
        self.db_path = os.environ.get("IDB_DB_PATH", str(self.data_dir / "identity.db"))
        self.rules_path = Path(os.environ.get("IDB_RULES_PATH", "rules.yaml"))
        self.admin_user_name = os.environ.get("IDB_ADMIN_USERNAME", "admin")
        self.admin_password = os.environ.get("IDB_ADMIN_PASSWORD") or None
        self.log_level = os.environ.get("IDB_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def validate_bootstrap_rules(rules: Rules) -> None:
    """
    Validate bootstrap requirements before startup.
    Raises ValueError listing every blank field.
    """
    boot = rules.bootstrap
    missing = []
    if not boot.admin_role.strip():
        missing.append("bootstrap.admin_role")
    if not boot.admin_display_name.strip():
        missing.append("bootstrap.admin_display_name")

    if missing:
        raise ValueError(f"Rules are missing required values: {', '.join(missing)}")


def ensure_data_dir(settings: Settings) -> None:
    """Create the directory that holds the database file."""
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
