from dataclasses import dataclass
import logging
import os
import sys
from dotenv import load_dotenv

load_dotenv()

def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")

# carries .env tokens, if dont exist uses fallbacks.
@dataclass(frozen=True)
class Settings:
    egroupware_url: str = os.getenv("EGROUPWARE_URL", "https://your-egroupware-instance.com")
    egroupware_username: str = os.getenv("EGROUPWARE_USERNAME", "")
    egroupware_password: str = os.getenv("EGROUPWARE_PASSWORD", "")
    egroupware_api_key: str = os.getenv("EGROUPWARE_API_KEY", "")
    test_mode_flag: bool = _flag("TEST_MODE")
    request_timeout: float = float(os.getenv("EGROUPWARE_TIMEOUT", "30"))
    verify_tls: bool = _flag("EGROUPWARE_VERIFY_TLS")  # off: self-signed certs are common
    default_timezone: str = os.getenv("DEFAULT_TIMEZONE", "America/Chicago")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def test_mode(self) -> bool:
        """Offline mode: explicit TEST_MODE, or nothing to authenticate with."""
        has_credentials = any((self.egroupware_username, self.egroupware_password, self.egroupware_api_key))
        return self.test_mode_flag or not has_credentials

settings = Settings()

def configure_logging(level: str = settings.log_level) -> None:
    """
    Send log records to stderr.
    stdout is reserved for protocol messages when running over stdio.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
