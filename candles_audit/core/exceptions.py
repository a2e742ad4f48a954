"""
Исключения для аудита свечей
"""


class CandlesAuditException(Exception):
    """Базовый класс для всех исключений аудита"""

    error_code = 'internal_error'

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'error': self.error_code,
            'message': self.message,
            'details': self.details
        }


class ConfigurationException(CandlesAuditException):
    """Отсутствует обязательная настройка"""

    error_code = 'configuration_missing'

    def __init__(self, name: str, message: str = None):
        self.name = name

        if message is None:
            message = f"{name} env variable is missing"

        super().__init__(message, {'name': name})


class ValidationException(CandlesAuditException):
    """Ошибка валидации параметров"""

    error_code = 'validation_error'

    def __init__(self, field: str, value: any, message: str = None):
        self.field = field
        self.value = value

        if message is None:
            message = f"Validation failed for field '{field}': invalid value '{value}'"

        details = {
            'field': field,
            'value': str(value)
        }

        super().__init__(message, details)


class TransportException(CandlesAuditException):
    """Ошибка HTTP запроса"""

    error_code = 'transport_error'

    def __init__(
        self,
        url: str,
        message: str,
        status: int = None,
        original_error: Exception = None
    ):
        self.url = url
        self.status = status
        self.original_error = original_error

        details = {'url': url}

        if status is not None:
            details['status'] = status

        if original_error:
            details['original_error'] = str(original_error)

        super().__init__(message, details)


class TimeoutException(TransportException):
    """Превышен timeout запроса"""

    error_code = 'timeout_error'

    def __init__(self, url: str, timeout: float, message: str = None):
        self.timeout = timeout

        if message is None:
            message = f"Request timeout exceeded ({timeout}s)"

        super().__init__(url, message)
        self.details['timeout'] = timeout


class DecodeException(CandlesAuditException):
    """Ответ не является JSON или не совпадает с ожидаемой формой"""

    error_code = 'decode_error'

    def __init__(self, message: str, original_error: Exception = None, details: dict = None):
        self.original_error = original_error
        details = details or {}

        if original_error:
            details['original_error'] = str(original_error)

        super().__init__(message, details)


class SchemaException(DecodeException):
    """Колонки ответа разной длины"""

    error_code = 'schema_error'

    def __init__(self, lengths: dict, message: str = None):
        self.lengths = lengths

        if message is None:
            message = f"Candle columns have mismatched lengths: {lengths}"

        super().__init__(message, details={'lengths': dict(lengths)})


class TimeArithmeticException(CandlesAuditException):
    """Переполнение при вычислениях со временем"""

    error_code = 'arithmetic_error'

    def __init__(self, value, message: str = None, original_error: Exception = None):
        self.value = value

        if message is None:
            message = f"Timestamp out of range: {value}"

        details = {'value': str(value)}
        if original_error:
            details['original_error'] = str(original_error)

        super().__init__(message, details)
