"""
Модуль для операций с файловой системой.

Обеспечивает чтение списка исходных файлов, создание каталогов по датам
(YYYY.MM.DD) и буферизованное копирование файлов.
"""

import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

try:
    from .config_loader import CopyConfig, MAX_BUFFER_SIZE_MB, MEGABYTE
    from .logger import FileCopyLogger
except ImportError:
    from config_loader import CopyConfig, MAX_BUFFER_SIZE_MB, MEGABYTE
    from logger import FileCopyLogger


DATE_FOLDER_FORMAT = "%Y.%m.%d"


class FileOperationError(Exception):
    """Исключение для ошибок операций с файлами."""
    pass


class DirectoryAccessError(FileOperationError):
    """Исходный каталог нельзя открыть или прочитать."""
    pass


class DirectoryCreateError(FileOperationError):
    """Каталог назначения не удалось создать."""
    pass


class CopyError(FileOperationError):
    """Исходный файл не читается или файл назначения не записывается."""
    pass


class AttributeCopyError(FileOperationError):
    """Атрибуты файла не удалось перенести."""
    pass


@dataclass(frozen=True)
class FileEntry:
    """Элемент исходного каталога."""
    path: Path
    name: str
    mtime: datetime
    is_dir: bool = False


def get_date_folder_name(dt: datetime) -> str:
    """
    Возвращает имя каталога по дате в формате YYYY.MM.DD.

    Args:
        dt: Дата изменения файла

    Returns:
        str: Имя каталога, например 2024.03.07
    """
    return dt.strftime(DATE_FOLDER_FORMAT)


def matches_extension(name: str, extension: str) -> bool:
    """Проверяет окончание имени без учета регистра."""
    return name.lower().endswith(extension.lower())


def _read_entry(path: Path) -> FileEntry:
    stat = path.stat()
    return FileEntry(
        path=path,
        name=path.name,
        mtime=datetime.fromtimestamp(stat.st_mtime),
        is_dir=path.is_dir()
    )


def list_source_entries(source: Path, extension: str, recursive: bool = False,
                        exclude: Optional[Path] = None,
                        logger: Optional[FileCopyLogger] = None) -> List[FileEntry]:
    """
    Получает список элементов исходного каталога, подходящих по расширению.

    Содержимое файлов не читается, только метаданные.

    Args:
        source: Исходный каталог
        extension: Окончание имени файла (без учета регистра)
        recursive: Обходить ли вложенные каталоги
        exclude: Каталог, в который не нужно спускаться (каталог назначения)
        logger: Логгер для предупреждений о пропущенных элементах

    Returns:
        List[FileEntry]: Подходящие элементы в порядке обхода

    Raises:
        DirectoryAccessError: Если исходный каталог не читается
    """
    source = Path(source)
    try:
        children = list(source.iterdir())
    except OSError as e:
        raise DirectoryAccessError(f"Не удалось прочитать каталог {source}: {e}") from e

    excluded = _resolve_or_none(exclude)
    entries: List[FileEntry] = []
    pending = [children]

    while pending:
        for path in pending.pop(0):
            try:
                entry = _read_entry(path)
            except OSError as e:
                if logger:
                    logger.log_warning(f"Не удалось прочитать атрибуты {path}: {e}")
                continue

            if matches_extension(entry.name, extension):
                entries.append(entry)

            if not (recursive and entry.is_dir) or path.is_symlink():
                continue
            if excluded is not None and _resolve_or_none(path) == excluded:
                continue
            try:
                pending.append(list(path.iterdir()))
            except OSError as e:
                if logger:
                    logger.log_warning(f"Не удалось прочитать каталог {path}: {e}")

    return entries


def _resolve_or_none(path: Optional[Path]) -> Optional[Path]:
    if path is None:
        return None
    try:
        return Path(path).resolve()
    except OSError:
        return None


class FileOps:
    """Класс для операций с файловой системой."""

    def __init__(self, config: CopyConfig, logger: FileCopyLogger):
        """
        Инициализация операций с файлами.

        Создает корневой каталог назначения.

        Args:
            config: Конфигурация запуска
            logger: Логгер для записи операций

        Raises:
            DirectoryCreateError: Если каталог назначения не удалось создать
        """
        self.config = config
        self.logger = logger
        self.source_path = Path(config.source)
        self.destination_path = Path(config.destination)
        self._date_directories: Dict[str, Path] = {}

        self._ensure_destination_exists()

    def _ensure_destination_exists(self) -> None:
        """Создает каталог назначения если он не существует."""
        if not str(self.config.destination).strip():
            raise DirectoryCreateError("Каталог назначения не указан")
        try:
            self.destination_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.log_critical_error("Ошибка создания каталога назначения", e)
            raise DirectoryCreateError(f"Ошибка создания каталога {self.destination_path}: {e}") from e

    def list_entries(self) -> List[FileEntry]:
        """
        Получает список подходящих элементов исходного каталога.

        Raises:
            DirectoryAccessError: Если исходный каталог не читается
        """
        if not str(self.config.source).strip():
            raise DirectoryAccessError("Исходный каталог не указан")
        return list_source_entries(
            self.source_path,
            self.config.extension,
            recursive=self.config.recursive,
            exclude=self.destination_path,
            logger=self.logger
        )

    def get_date_directory(self, dt: datetime) -> Path:
        """Получает путь к каталогу по дате."""
        return self.destination_path / get_date_folder_name(dt)

    def ensure_date_directory(self, dt: datetime) -> Path:
        """
        Создает каталог по дате если он не существует.

        Каждый каталог создается один раз за запуск, далее берется из кэша.

        Args:
            dt: Дата изменения файла

        Returns:
            Path: Путь к каталогу по дате

        Raises:
            DirectoryCreateError: Если каталог не удалось создать
        """
        folder_name = get_date_folder_name(dt)
        cached = self._date_directories.get(folder_name)
        if cached is not None:
            return cached

        date_dir = self.destination_path / folder_name
        try:
            existed = date_dir.is_dir()
            date_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(f"Ошибка создания каталога по дате [{folder_name}]: {e}") from e

        if not existed:
            self.logger.log_date_directory_created(date_dir)
        self._date_directories[folder_name] = date_dir
        return date_dir

    def copy_file(self, source: Path, destination: Path) -> int:
        """
        Копирует содержимое файла через буфер ограниченного размера.

        Args:
            source: Исходный файл
            destination: Файл назначения (создается или перезаписывается)

        Returns:
            int: Количество скопированных байт

        Raises:
            CopyError: Если исходный файл не читается или файл назначения не записывается
        """
        return copy_file(source, destination, self.config.buffer_size)


def copy_file(source: Path, destination: Path, buffer_size: int) -> int:
    """
    Копирует файл побайтно через буфер размером buffer_size.

    Исходный файл открывается первым, чтобы не повредить существующий
    файл назначения, если источник недоступен. При ошибке записи
    частично записанный файл назначения удаляется, в том числе
    при прерывании копирования любым другим исключением.

    Args:
        source: Исходный файл
        destination: Файл назначения
        buffer_size: Размер буфера в байтах

    Returns:
        int: Количество скопированных байт

    Raises:
        CopyError: Если копирование не удалось
    """
    if not 0 < buffer_size <= MAX_BUFFER_SIZE_MB * MEGABYTE:
        raise ValueError(f"Размер буфера должен быть от 1 байта до {MAX_BUFFER_SIZE_MB} МБ")

    try:
        fsrc = open(source, 'rb')
    except OSError as e:
        raise CopyError(f"Не удалось открыть файл {source}: {e}") from e

    with fsrc:
        try:
            fdst = open(destination, 'wb')
        except OSError as e:
            raise CopyError(f"Не удалось создать файл {destination}: {e}") from e

        completed = False
        try:
            with fdst:
                shutil.copyfileobj(fsrc, fdst, buffer_size)
                copied = fdst.tell()
            completed = True
        except OSError as e:
            raise CopyError(f"Ошибка копирования {source} → {destination}: {e}") from e
        finally:
            if not completed:
                _remove_partial(Path(destination))

    return copied


def _remove_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        # Файл назначения заблокирован, сообщаем исходную ошибку
        pass


def create_file_ops(config: CopyConfig, logger: FileCopyLogger) -> FileOps:
    """
    Удобная функция для создания объекта операций с файлами.

    Args:
        config: Конфигурация запуска
        logger: Логгер

    Returns:
        FileOps: Объект операций с файлами
    """
    return FileOps(config, logger)
