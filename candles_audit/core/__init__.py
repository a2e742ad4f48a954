"""Core components of Candles Audit"""

from .exceptions import (
    CandlesAuditException,
    ConfigurationException,
    ValidationException,
    TransportException,
    TimeoutException,
    DecodeException,
    SchemaException,
    TimeArithmeticException,
)
from .config import AuditConfig

__all__ = [
    'CandlesAuditException',
    'ConfigurationException',
    'ValidationException',
    'TransportException',
    'TimeoutException',
    'DecodeException',
    'SchemaException',
    'TimeArithmeticException',
    'AuditConfig',
]
