"""
Runtime settings for textcrypt

All settings come from the environment with development defaults.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Settings resolved from environment variables."""
    log_level: str = "WARNING"
    default_format: str = "blake3"
    password_length: int = 16

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=os.environ.get("TEXTCRYPT_LOG_LEVEL", "WARNING").upper(),
            default_format=os.environ.get("TEXTCRYPT_DEFAULT_FORMAT", "blake3").lower(),
            password_length=int(os.environ.get("TEXTCRYPT_PASSWORD_LENGTH", 16)),
        )
