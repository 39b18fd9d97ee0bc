"""
Модуль бизнес-логики копирования файлов.

Объединяет чтение исходного каталога, создание каталогов по датам
и копирование файлов. Файлы обрабатываются по одному, ошибка одного
файла не прерывает обработку остальных.
"""

import enum
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

try:
    from .attributes import AttributePropagator, select_propagator
    from .config_loader import CopyConfig
    from .file_ops import (
        AttributeCopyError,
        FileEntry,
        FileOperationError,
        FileOps,
        get_date_folder_name,
    )
    from .logger import FileCopyLogger
except ImportError:
    from attributes import AttributePropagator, select_propagator
    from config_loader import CopyConfig
    from file_ops import (
        AttributeCopyError,
        FileEntry,
        FileOperationError,
        FileOps,
        get_date_folder_name,
    )
    from logger import FileCopyLogger


class TransferOutcome(enum.Enum):
    """Результат обработки одного файла."""
    COPIED = "copied"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"
    ERROR = "error"


class CopyStats:
    """Класс для хранения статистики копирования."""

    def __init__(self):
        self.total_files = 0
        self.copied = 0
        self.skipped = 0
        self.overwritten = 0
        self.errors = 0
        self.start_time = None
        self.end_time = None
        self.error_details = []

    def record(self, outcome: TransferOutcome) -> None:
        """Увеличивает счетчик, соответствующий результату."""
        if outcome is TransferOutcome.COPIED:
            self.copied += 1
        elif outcome is TransferOutcome.OVERWRITTEN:
            self.overwritten += 1
        elif outcome is TransferOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1

    def add_error(self, filename: str, error: Exception) -> None:
        """Добавляет ошибку в список для итогового отчета."""
        self.error_details.append({
            'file': filename,
            'error': str(error),
            'timestamp': datetime.now()
        })

    @property
    def processed_files(self) -> int:
        return self.copied + self.skipped + self.overwritten + self.errors

    def get_duration(self) -> Optional[float]:
        """Возвращает продолжительность копирования в секундах."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_dict(self) -> Dict:
        """Преобразует статистику в словарь."""
        return {
            'total_files': self.total_files,
            'processed_files': self.processed_files,
            'copied': self.copied,
            'skipped': self.skipped,
            'overwritten': self.overwritten,
            'errors': self.errors,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.get_duration(),
        }


class FileCopier:
    """Основной класс для копирования файлов по каталогам дат."""

    def __init__(self, config: CopyConfig, logger: FileCopyLogger,
                 propagator: Optional[AttributePropagator] = None):
        """
        Инициализация копировщика.

        Args:
            config: Конфигурация запуска
            logger: Логгер для записи операций
            propagator: Перенос атрибутов (по умолчанию выбирается по платформе)

        Raises:
            DirectoryCreateError: Если каталог назначения не удалось создать
        """
        self.config = config
        self.logger = logger
        if propagator is None:
            propagator = select_propagator(config.preserve_attributes, config.os_name)
        self.propagator = propagator
        self.file_ops = FileOps(config, logger)
        self.stats = CopyStats()

    def run(self) -> CopyStats:
        """
        Копирует все подходящие файлы.

        Returns:
            CopyStats: Статистика копирования

        Raises:
            DirectoryAccessError: Если исходный каталог не читается
        """
        self.stats.start_time = datetime.now()

        try:
            entries = self.file_ops.list_entries()
        except FileOperationError as e:
            self.stats.end_time = datetime.now()
            self.logger.log_critical_error("Ошибка чтения исходного каталога", e)
            raise

        files = [entry for entry in entries if not entry.is_dir]
        self.stats.total_files = len(files)
        self.logger.log_copy_start(len(files), self.file_ops.source_path, self.file_ops.destination_path)

        for entry in files:
            outcome = self._copy_single_file(entry)
            self.stats.record(outcome)

        self.stats.end_time = datetime.now()
        self.logger.log_copy_end(
            copied=self.stats.copied,
            skipped=self.stats.skipped,
            overwritten=self.stats.overwritten,
            errors=self.stats.errors
        )
        return self.stats

    def _copy_single_file(self, entry: FileEntry) -> TransferOutcome:
        """
        Копирует один файл.

        Args:
            entry: Элемент исходного каталога

        Returns:
            TransferOutcome: Результат обработки файла
        """
        date_folder = get_date_folder_name(entry.mtime)

        try:
            target_dir = self.file_ops.ensure_date_directory(entry.mtime)
            target_path = target_dir / entry.name

            exists = target_path.exists()
            if exists and self._is_same_file(entry.path, target_path):
                self.logger.log_file_skipped(entry.name, date_folder, "источник совпадает с назначением")
                return TransferOutcome.SKIPPED

            if exists and not self.config.overwrite:
                self.logger.log_file_skipped(entry.name, date_folder)
                return TransferOutcome.SKIPPED

            if exists:
                self.logger.log_file_overwritten(entry.name, date_folder)
            else:
                self.logger.log_file_copied(entry.name, date_folder)

            self.file_ops.copy_file(entry.path, target_path)

        except (FileOperationError, OSError) as e:
            self.stats.add_error(entry.name, e)
            self.logger.log_file_error(entry.name, e)
            return TransferOutcome.ERROR

        self._propagate_attributes(entry, target_path)
        return TransferOutcome.OVERWRITTEN if exists else TransferOutcome.COPIED

    def _propagate_attributes(self, entry: FileEntry, target_path: Path) -> None:
        try:
            self.propagator.propagate(entry.path, target_path)
        except AttributeCopyError as e:
            self.logger.log_attribute_warning(entry.name, e)

    @staticmethod
    def _is_same_file(source: Path, target: Path) -> bool:
        try:
            return os.path.samefile(source, target)
        except OSError:
            return False


def create_copier(config: CopyConfig, logger: FileCopyLogger) -> FileCopier:
    """
    Удобная функция для создания копировщика.

    Args:
        config: Конфигурация запуска
        logger: Логгер

    Returns:
        FileCopier: Объект копировщика
    """
    return FileCopier(config, logger)
