"""
Запуск аудита свечей из корня проекта (PyCharm / без установки пакета)
"""

import sys
import os

# Добавляем путь к корню проекта в sys.path
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from candles_audit.cli import main

if __name__ == "__main__":
    sys.exit(main())
