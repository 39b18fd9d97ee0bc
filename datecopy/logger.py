"""
Модуль для настройки и управления логированием приложения.

Обеспечивает централизованную настройку логирования с ротацией файлов,
цветным выводом в консоль и сообщениями о ходе копирования.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

try:
    from .config_loader import LoggingConfig
except ImportError:
    from config_loader import LoggingConfig


LOGGER_NAME = 'datecopy'
FILE_ONLY = {'file_only': True}


class ColoredFormatter(logging.Formatter):
    """Форматтер с цветным выводом для консоли."""

    # Цветовые коды ANSI
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        """Форматирует запись лога с цветом."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Запись разделяется с файловым обработчиком
            record.levelname = levelname


class FileOnlyFilter(logging.Filter):
    """Не пропускает в консоль записи, помеченные как file_only."""

    def filter(self, record):
        return not getattr(record, 'file_only', False)


class FileCopyLogger:
    """Класс для управления логированием приложения datecopy."""

    def __init__(self, config: LoggingConfig):
        """
        Инициализация логгера.

        Args:
            config: Конфигурация логирования
        """
        self.config = config
        self.logger: Optional[logging.Logger] = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Настраивает логгер с файловым и консольным выводом."""
        level = getattr(logging, self.config.level.upper())

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)

        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

        formatter = logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        colored_formatter = ColoredFormatter(fmt='%(levelname)s %(message)s')

        log_file_path = Path(self.config.log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=self.config.max_log_size * 1024 * 1024,  # MB в байты
            backupCount=self.config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(colored_formatter)
        console_handler.setLevel(level)
        console_handler.addFilter(FileOnlyFilter())

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

        # Предотвращаем дублирование сообщений
        self.logger.propagate = False

    def get_logger(self) -> logging.Logger:
        """
        Возвращает настроенный логгер.

        Returns:
            logging.Logger: Настроенный логгер
        """
        if self.logger is None:
            raise RuntimeError("Логгер не инициализирован")
        return self.logger

    def close(self) -> None:
        """Закрывает обработчики логгера."""
        if self.logger is None:
            return
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

    def log_copy_start(self, total_files: int, source: Path, destination: Path) -> None:
        """
        Логирует начало копирования.

        Args:
            total_files: Количество найденных файлов
            source: Исходный каталог
            destination: Целевой каталог
        """
        self.logger.info(f"🚀 Начало копирования файлов: {source} → {destination}")
        self.logger.info(f"📊 Найдено файлов: {total_files}")
        self.logger.info(f"⏰ Время начала: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_copy_end(self, copied: int, skipped: int, overwritten: int, errors: int) -> None:
        """
        Логирует завершение копирования.

        Итоги пишутся только в файл, в консоль их выводит CLI.

        Args:
            copied: Скопировано файлов
            skipped: Пропущено файлов
            overwritten: Перезаписано файлов
            errors: Ошибок при копировании
        """
        self.logger.info("✅ Копирование завершено", extra=FILE_ONLY)
        self.logger.info(f"   • Скопировано: {copied}", extra=FILE_ONLY)
        self.logger.info(f"   • Пропущено: {skipped}", extra=FILE_ONLY)
        self.logger.info(f"   • Перезаписано: {overwritten}", extra=FILE_ONLY)
        self.logger.info(f"   • Ошибок: {errors}", extra=FILE_ONLY)

    def log_file_copied(self, filename: str, date_folder: str) -> None:
        """Логирует копирование файла в каталог по дате."""
        self.logger.info(f"📁 copy: {filename} → {date_folder}")

    def log_file_overwritten(self, filename: str, date_folder: str) -> None:
        """Логирует перезапись существующего файла."""
        self.logger.info(f"♻️ overwrite: {filename} → {date_folder}")

    def log_file_skipped(self, filename: str, date_folder: str, reason: str = "файл уже существует") -> None:
        """
        Логирует пропуск файла.

        Args:
            filename: Имя файла
            date_folder: Каталог по дате
            reason: Причина пропуска
        """
        self.logger.warning(f"⏭️ skip: {filename} → {date_folder} ({reason})")

    def log_file_error(self, filename: str, error: Exception) -> None:
        """
        Логирует ошибку при обработке файла.

        Args:
            filename: Имя файла
            error: Исключение
        """
        self.logger.error(f"❌ Ошибка при обработке файла {filename}: {error}")

    def log_attribute_warning(self, filename: str, error: Exception) -> None:
        """Логирует неудачный перенос атрибутов файла."""
        self.logger.warning(f"⚠️ Не удалось скопировать атрибуты файла {filename}: {error}")

    def log_date_directory_created(self, date_dir: Path) -> None:
        """Логирует создание каталога по дате."""
        self.logger.debug(f"📂 Создан каталог: {date_dir}")

    def log_config(self, config_json: str) -> None:
        """Логирует текущую конфигурацию запуска."""
        self.logger.debug(f"⚙️ Текущая конфигурация: {config_json}")

    def log_system_info(self, info: str) -> None:
        """Логирует системную информацию."""
        self.logger.info(f"ℹ️ {info}")

    def log_warning(self, message: str) -> None:
        """Логирует предупреждение."""
        self.logger.warning(f"⚠️ {message}")

    def log_critical_error(self, message: str, error: Exception = None) -> None:
        """
        Логирует критическую ошибку.

        Args:
            message: Сообщение об ошибке
            error: Исключение (опционально)
        """
        if error:
            self.logger.critical(f"💥 {message}: {error}")
        else:
            self.logger.critical(f"💥 {message}")


def setup_logger(config: LoggingConfig) -> logging.Logger:
    """
    Удобная функция для быстрой настройки логгера.

    Args:
        config: Конфигурация логирования

    Returns:
        logging.Logger: Настроенный логгер
    """
    return FileCopyLogger(config).get_logger()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Получает логгер по имени."""
    return logging.getLogger(name)
