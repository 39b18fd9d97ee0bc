"""
Модуль интерактивного ввода параметров копирования.

Каждый параметр читается одной строкой. Пути не проверяются:
ошибки обнаруживаются при открытии каталогов.
"""

import sys
from typing import Callable, Optional

try:
    from .config_loader import CopyConfig, CopyDefaults, MEGABYTE, MAX_BUFFER_SIZE_MB
except ImportError:
    from config_loader import CopyConfig, CopyDefaults, MEGABYTE, MAX_BUFFER_SIZE_MB


def parse_yes_no(text: str) -> bool:
    """Ответ 'y' в любом регистре означает да, всё остальное нет."""
    return text.strip().lower() == "y"


def parse_buffer_size(text: str, default_mb: int) -> int:
    """
    Преобразует размер буфера в мегабайтах в байты.

    Значения вне диапазона 1..MAX_BUFFER_SIZE_MB заменяются значением по умолчанию.

    Args:
        text: Введенная строка
        default_mb: Размер по умолчанию в мегабайтах

    Returns:
        int: Размер буфера в байтах
    """
    try:
        size_mb = int(text.strip())
    except ValueError:
        size_mb = default_mb
    if not 0 < size_mb <= MAX_BUFFER_SIZE_MB:
        size_mb = default_mb
    return size_mb * MEGABYTE


class ParameterCollector:
    """Собирает параметры копирования из стандартного ввода."""

    def __init__(self, defaults: Optional[CopyDefaults] = None,
                 reader: Callable[[str], str] = input):
        """
        Args:
            defaults: Значения по умолчанию из файла настроек
            reader: Функция чтения строки (по умолчанию input)
        """
        self.defaults = defaults or CopyDefaults()
        self.reader = reader

    def _ask(self, prompt: str) -> str:
        try:
            return self.reader(prompt)
        except EOFError:
            return ""

    def collect(self, source: Optional[str] = None, destination: Optional[str] = None,
                extension: Optional[str] = None, buffer_size_mb: Optional[int] = None,
                overwrite: Optional[bool] = None, recursive: Optional[bool] = None,
                preserve_attributes: Optional[bool] = None) -> CopyConfig:
        """
        Запрашивает недостающие параметры и собирает конфигурацию.

        Параметры, переданные явно, не запрашиваются.

        Returns:
            CopyConfig: Конфигурация запуска
        """
        if source is None:
            source = self._ask("Исходный каталог: ")
        if destination is None:
            destination = self._ask("Каталог назначения: ")
        if extension is None:
            extension = self._ask("Расширение файлов (например .jpg): ")

        if buffer_size_mb is None:
            buffer_size = parse_buffer_size(
                self._ask(f"Размер буфера копирования в МБ (по умолчанию {self.defaults.buffer_size_mb}): "),
                self.defaults.buffer_size_mb
            )
        else:
            buffer_size = parse_buffer_size(str(buffer_size_mb), self.defaults.buffer_size_mb)

        if overwrite is None:
            overwrite = parse_yes_no(self._ask("Перезаписывать существующие файлы? [y/N]: "))
        if recursive is None:
            recursive = parse_yes_no(self._ask("Обходить вложенные каталоги? [y/N]: "))
        if preserve_attributes is None:
            preserve_attributes = self.defaults.preserve_attributes

        return CopyConfig(
            source=source,
            destination=destination,
            extension=extension,
            overwrite=overwrite,
            recursive=recursive,
            buffer_size=buffer_size,
            preserve_attributes=preserve_attributes,
            os_name=sys.platform
        )
