"""
Adapter Configuration
=====================
Configuration loaded once from the environment and treated as read-only.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

ENV_PREFIX = "STEPUP_"


@dataclass(frozen=True)
class AdapterConfig:
    """Configuration for the step-up authentication adapter."""
    service_name: str = "stepup-adapter"
    sms_otp_expiration_time: int = 300  # seconds
    sms_otp_max_verify_tries_per_message: int = 5
    auth_max_failed_attempts: int = 0  # 0 disables the lockout budget
    default_lang: str = "en"
    database_url: str = "sqlite+aiosqlite:///./stepup.db"
    log_level: str = "INFO"
    log_json: bool = True

    def __post_init__(self):
        if self.sms_otp_expiration_time <= 0:
            raise ValueError("sms_otp_expiration_time must be positive")
        if self.sms_otp_max_verify_tries_per_message <= 0:
            raise ValueError("sms_otp_max_verify_tries_per_message must be positive")
        if self.auth_max_failed_attempts < 0:
            raise ValueError("auth_max_failed_attempts must not be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AdapterConfig":
        """
        Build configuration from environment variables.

        Every field can be overridden by an upper-case variable with the
        ``STEPUP_`` prefix, e.g. ``STEPUP_SMS_OTP_EXPIRATION_TIME=120``.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def _get(name: str, default: str) -> str:
            return env.get(f"{ENV_PREFIX}{name}", default)

        return cls(
            service_name=_get("SERVICE_NAME", defaults.service_name),
            sms_otp_expiration_time=int(
                _get("SMS_OTP_EXPIRATION_TIME", str(defaults.sms_otp_expiration_time))
            ),
            sms_otp_max_verify_tries_per_message=int(
                _get(
                    "SMS_OTP_MAX_VERIFY_TRIES_PER_MESSAGE",
                    str(defaults.sms_otp_max_verify_tries_per_message),
                )
            ),
            auth_max_failed_attempts=int(
                _get("AUTH_MAX_FAILED_ATTEMPTS", str(defaults.auth_max_failed_attempts))
            ),
            default_lang=_get("DEFAULT_LANG", defaults.default_lang),
            database_url=_get("DATABASE_URL", defaults.database_url),
            log_level=_get("LOG_LEVEL", defaults.log_level).upper(),
            log_json=_get("LOG_JSON", "true").lower() in ("1", "true", "yes"),
        )


@lru_cache(maxsize=1)
def get_config() -> AdapterConfig:
    """Get cached configuration instance."""
    return AdapterConfig.from_env()
