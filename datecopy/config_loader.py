"""
Модуль для загрузки и валидации конфигурации приложения.

Обеспечивает загрузку настроек по умолчанию из config/settings.ini
и описывает неизменяемую конфигурацию одного запуска копирования.
"""

import configparser
import json
import sys
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, asdict


DEFAULT_CONFIG_PATH = "config/settings.ini"
MEGABYTE = 1024 * 1024
DEFAULT_BUFFER_SIZE_MB = 1
MAX_BUFFER_SIZE_MB = 256


@dataclass
class CopyDefaults:
    """Параметры копирования по умолчанию."""
    buffer_size_mb: int = DEFAULT_BUFFER_SIZE_MB
    preserve_attributes: bool = True
    pause_on_exit: bool = False


@dataclass
class LoggingConfig:
    """Конфигурация логирования."""
    level: str
    log_file: Path
    max_log_size: int
    backup_count: int


@dataclass
class Settings:
    """Настройки приложения из файла конфигурации."""
    copy: CopyDefaults
    logging: LoggingConfig


@dataclass(frozen=True)
class CopyConfig:
    """Конфигурация одного запуска копирования. Только для чтения."""
    source: str
    destination: str
    extension: str
    overwrite: bool = False
    recursive: bool = False
    buffer_size: int = DEFAULT_BUFFER_SIZE_MB * MEGABYTE
    preserve_attributes: bool = True
    os_name: str = sys.platform

    def __post_init__(self):
        if not 0 < self.buffer_size <= MAX_BUFFER_SIZE_MB * MEGABYTE:
            raise ValueError(f"Размер буфера должен быть от 1 байта до {MAX_BUFFER_SIZE_MB} МБ")

    def to_dict(self) -> dict:
        """Преобразует конфигурацию в словарь."""
        return asdict(self)

    def to_json(self) -> str:
        """Возвращает конфигурацию в виде JSON для вывода пользователю."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def default_settings() -> Settings:
    """Возвращает встроенные настройки, если файла конфигурации нет."""
    return Settings(
        copy=CopyDefaults(),
        logging=LoggingConfig(
            level='INFO',
            log_file=Path('logs/datecopy.log'),
            max_log_size=10,
            backup_count=5
        )
    )


class ConfigLoader:
    """Класс для загрузки и валидации конфигурации."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        """
        Инициализация загрузчика конфигурации.

        Args:
            config_path: Путь к файлу конфигурации
        """
        self.config_path = Path(config_path)
        self._config: Optional[Settings] = None

    def load_config(self) -> Settings:
        """
        Загружает конфигурацию из файла.

        Returns:
            Settings: Объект настроек

        Raises:
            FileNotFoundError: Если файл конфигурации не найден
            ValueError: Если конфигурация некорректна
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Файл конфигурации не найден: {self.config_path}")

        config_parser = configparser.ConfigParser()

        try:
            config_parser.read(self.config_path, encoding='utf-8')

            self._config = Settings(
                copy=self._load_copy_config(config_parser),
                logging=self._load_logging_config(config_parser)
            )

            self._validate_config()

            return self._config

        except (configparser.Error, ValueError) as e:
            self._config = None
            raise ValueError(f"Ошибка загрузки конфигурации: {e}") from e

    def _load_copy_config(self, parser: configparser.ConfigParser) -> CopyDefaults:
        """Загружает параметры копирования. Секция необязательна."""
        section = 'copy'

        if not parser.has_section(section):
            return CopyDefaults()

        return CopyDefaults(
            buffer_size_mb=parser.getint(section, 'buffer_size_mb', fallback=DEFAULT_BUFFER_SIZE_MB),
            preserve_attributes=parser.getboolean(section, 'preserve_attributes', fallback=True),
            pause_on_exit=parser.getboolean(section, 'pause_on_exit', fallback=False)
        )

    def _load_logging_config(self, parser: configparser.ConfigParser) -> LoggingConfig:
        """Загружает конфигурацию логирования."""
        section = 'logging'

        if not parser.has_section(section):
            raise ValueError(f"Секция '{section}' не найдена в конфигурации")

        return LoggingConfig(
            level=parser.get(section, 'level', fallback='INFO'),
            log_file=Path(parser.get(section, 'log_file', fallback='logs/datecopy.log')),
            max_log_size=parser.getint(section, 'max_log_size', fallback=10),
            backup_count=parser.getint(section, 'backup_count', fallback=5)
        )

    def _validate_config(self) -> None:
        """Валидирует загруженную конфигурацию."""
        if not self._config:
            raise ValueError("Конфигурация не загружена")

        if not 0 < self._config.copy.buffer_size_mb <= MAX_BUFFER_SIZE_MB:
            raise ValueError(f"Размер буфера должен быть от 1 до {MAX_BUFFER_SIZE_MB} МБ")

        if self._config.logging.max_log_size <= 0:
            raise ValueError("Размер файла лога должен быть больше 0")

        if self._config.logging.backup_count < 0:
            raise ValueError("Количество архивных логов не может быть отрицательным")

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self._config.logging.level.upper() not in valid_levels:
            raise ValueError(f"Некорректный уровень логирования: {self._config.logging.level}")

    def get_config(self) -> Settings:
        """
        Возвращает загруженную конфигурацию.

        Raises:
            ValueError: Если конфигурация не загружена
        """
        if self._config is None:
            raise ValueError("Конфигурация не загружена. Вызовите load_config() сначала.")
        return self._config


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Загружает настройки приложения.

    Если путь не указан, читается config/settings.ini, а при его
    отсутствии используются встроенные настройки. Явно указанный
    несуществующий файл считается ошибкой.

    Args:
        config_path: Путь к файлу конфигурации

    Returns:
        Settings: Объект настроек
    """
    if config_path is None:
        if not Path(DEFAULT_CONFIG_PATH).exists():
            return default_settings()
        config_path = DEFAULT_CONFIG_PATH

    loader = ConfigLoader(config_path)
    return loader.load_config()
