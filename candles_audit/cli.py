"""
Точка входа: аудит истории свечей по настройкам из окружения
"""

import asyncio
import logging
import sys

from .adapters.history import get_provider
from .core.auditor import CoverageAuditor
from .core.config import AuditConfig, get_config
from .core.driver import WindowDriver
from .core.exceptions import CandlesAuditException

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger("candles_audit.cli")


async def run(config: AuditConfig):
    async with get_provider() as provider:
        driver = WindowDriver.from_config(CoverageAuditor(provider), config)
        return await driver.run_default(config)


def main() -> int:
    try:
        config = get_config()
    except CandlesAuditException as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"Invalid configuration: {e.to_dict()}")
        return 1

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    logger.debug(f"Loaded {config!r}")

    try:
        asyncio.run(run(config))
    except CandlesAuditException as e:
        logger.error(f"Audit failed: {e.to_dict()}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
