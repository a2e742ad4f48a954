"""
Базовый класс для провайдеров истории свечей
"""

from abc import ABC, abstractmethod
import logging

from ..core.exceptions import ValidationException
from ..core.models import RawCandleResponse
from ..core.timestamps import validate_resolution


class AbstractHistoryProvider(ABC):
    """Базовый класс для источников /history"""

    def __init__(self, name: str = None, timeout: float = 30):
        self.name = name or self.__class__.__name__
        self.timeout = timeout
        self.logger = logging.getLogger(f"candles_audit.{self.name}")

    @abstractmethod
    async def fetch_history(
        self,
        resolution: int,
        from_ts: int,
        to_ts: int,
    ) -> RawCandleResponse:
        """Получить сырые колонки свечей за окно"""
        pass

    @abstractmethod
    def build_url(self, resolution: int, from_ts: int, to_ts: int) -> str:
        """Собрать URL запроса"""
        pass

    def validate_symbol(self, symbol: str) -> None:
        if not symbol or not isinstance(symbol, str):
            raise ValidationException('symbol', symbol, "Symbol must be non-empty string")

    def validate_resolution(self, resolution: int) -> None:
        validate_resolution(resolution)

    def validate_window(self, from_ts: int, to_ts: int) -> None:
        for field, value in (('from', from_ts), ('to', to_ts)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationException(field, value, f"'{field}' must be an integer timestamp")

        if from_ts > to_ts:
            raise ValidationException(
                'from',
                from_ts,
                f"Window start {from_ts} is after window end {to_ts}"
            )

    def validate_all(self, resolution: int, from_ts: int, to_ts: int) -> None:
        self.validate_resolution(resolution)
        self.validate_window(from_ts, to_ts)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}', timeout={self.timeout})>"
