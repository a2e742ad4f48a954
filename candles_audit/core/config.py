"""
Конфигурация аудита из переменных окружения
"""

import os
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Literal

from dotenv import load_dotenv

from .exceptions import ConfigurationException, ValidationException

AuditMode = Literal["simple", "randomized"]

DEFAULT_SYMBOL = 'SOL/USDC'
DEFAULT_RESOLUTION = 60
DEFAULT_LOOKBACK_DAYS = 14
DEFAULT_RANDOM_LIMIT = 10
DEFAULT_TIMEOUT = 30

VALID_MODES = ["simple", "randomized"]
VALID_LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


@dataclass
class AuditConfig:
    """Настройки аудита: endpoint, символ, окно и режим"""

    base_url: str
    symbol: str = DEFAULT_SYMBOL
    resolution: int = DEFAULT_RESOLUTION
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    mode: AuditMode = "simple"
    random_limit: int = DEFAULT_RANDOM_LIMIT
    random_seed: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AuditConfig":
        """Load configuration from the environment (and a .env file if present).

        Fails immediately if BASE_URL is missing.
        """
        if load_env_file:
            load_dotenv()

        base_url = os.getenv("BASE_URL", "")
        if not base_url:
            raise ConfigurationException("BASE_URL")

        seed = os.getenv("AUDIT_RANDOM_SEED")

        config = cls(
            base_url=base_url,
            symbol=os.getenv("SYMBOL", DEFAULT_SYMBOL),
            resolution=_int_env("AUDIT_RESOLUTION", DEFAULT_RESOLUTION),
            lookback_days=_int_env("AUDIT_LOOKBACK_DAYS", DEFAULT_LOOKBACK_DAYS),
            mode=os.getenv("AUDIT_MODE", "simple").lower(),
            random_limit=_int_env("AUDIT_RANDOM_LIMIT", DEFAULT_RANDOM_LIMIT),
            random_seed=_int_env("AUDIT_RANDOM_SEED", None) if seed else None,
            timeout=_float_env("REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.base_url:
            raise ConfigurationException("BASE_URL")
        if not self.base_url.endswith('/'):
            raise ValidationException('BASE_URL', self.base_url, "BASE_URL must end with '/'")
        if not self.symbol:
            raise ValidationException('SYMBOL', self.symbol, "Symbol must be non-empty string")
        if self.resolution <= 0:
            raise ValidationException('AUDIT_RESOLUTION', self.resolution, "Resolution must be positive")
        if self.lookback_days <= 0:
            raise ValidationException('AUDIT_LOOKBACK_DAYS', self.lookback_days, "Lookback must be positive")
        if self.mode not in VALID_MODES:
            raise ValidationException(
                'AUDIT_MODE',
                self.mode,
                f"Invalid mode. Valid options: {', '.join(VALID_MODES)}"
            )
        if self.random_limit < 1:
            raise ValidationException('AUDIT_RANDOM_LIMIT', self.random_limit, "Limit must be at least 1")
        if self.timeout <= 0:
            raise ValidationException('REQUEST_TIMEOUT', self.timeout, "Timeout must be positive")
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValidationException(
                'LOG_LEVEL',
                self.log_level,
                f"Invalid log level. Valid options: {', '.join(VALID_LOG_LEVELS)}"
            )

    def to_dict(self) -> Dict:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"<AuditConfig(symbol='{self.symbol}', resolution={self.resolution}, "
            f"mode='{self.mode}')>"
        )


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationException(name, raw, f"{name} must be an integer")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationException(name, raw, f"{name} must be a number")


_config_instance = None


def get_config() -> AuditConfig:
    global _config_instance
    if _config_instance is None:
        _config_instance = AuditConfig.from_env()
    return _config_instance
