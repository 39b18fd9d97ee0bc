"""
Модуль для переноса атрибутов исходного файла на скопированный.

Реализация выбирается один раз при запуске в зависимости от платформы
и настроек. Перенос атрибутов выполняется по возможности: ошибка
сообщается через AttributeCopyError и не влияет на результат копирования.
"""

import shutil
import sys
from pathlib import Path
from typing import Optional

try:
    from .file_ops import AttributeCopyError
except ImportError:
    from file_ops import AttributeCopyError


# Константы kernel32
GENERIC_READ = 0x80000000
GENERIC_WRITE = 0x40000000
FILE_SHARE_READ = 0x1
OPEN_EXISTING = 3
FILE_ATTRIBUTE_NORMAL = 0x80


class AttributePropagator:
    """Базовый интерфейс переноса атрибутов."""

    name = "base"

    def propagate(self, source: Path, destination: Path) -> None:
        """
        Переносит атрибуты source на destination.

        Raises:
            AttributeCopyError: Если атрибуты перенести не удалось
        """
        raise NotImplementedError


class NoOpPropagator(AttributePropagator):
    """Ничего не переносит. Используется, когда перенос отключен."""

    name = "noop"

    def propagate(self, source: Path, destination: Path) -> None:
        return None


class StatPropagator(AttributePropagator):
    """Переносит время доступа, время изменения и права доступа через shutil.copystat."""

    name = "stat"

    def propagate(self, source: Path, destination: Path) -> None:
        try:
            shutil.copystat(source, destination)
        except OSError as e:
            raise AttributeCopyError(f"Ошибка копирования атрибутов {source} → {destination}: {e}") from e


class WindowsFileTimePropagator(AttributePropagator):
    """
    Переносит время создания, последнего доступа и последней записи
    через GetFileTime/SetFileTime из kernel32.
    """

    name = "windows"

    def __init__(self):
        import ctypes
        from ctypes import wintypes

        self._ctypes = ctypes
        self._wintypes = wintypes
        self._kernel32 = ctypes.WinDLL('kernel32', use_last_error=True)

        self._kernel32.CreateFileW.restype = wintypes.HANDLE
        self._kernel32.CreateFileW.argtypes = [
            wintypes.LPCWSTR, wintypes.DWORD, wintypes.DWORD, wintypes.LPVOID,
            wintypes.DWORD, wintypes.DWORD, wintypes.HANDLE
        ]
        filetime_ptr = ctypes.POINTER(wintypes.FILETIME)
        self._kernel32.GetFileTime.argtypes = [wintypes.HANDLE, filetime_ptr, filetime_ptr, filetime_ptr]
        self._kernel32.GetFileTime.restype = wintypes.BOOL
        self._kernel32.SetFileTime.argtypes = [wintypes.HANDLE, filetime_ptr, filetime_ptr, filetime_ptr]
        self._kernel32.SetFileTime.restype = wintypes.BOOL
        self._kernel32.FlushFileBuffers.argtypes = [wintypes.HANDLE]
        self._kernel32.FlushFileBuffers.restype = wintypes.BOOL
        self._kernel32.CloseHandle.argtypes = [wintypes.HANDLE]
        self._kernel32.CloseHandle.restype = wintypes.BOOL

        self._invalid_handle = ctypes.c_void_p(-1).value

    def _open(self, path: Path, access: int, share: int):
        handle = self._kernel32.CreateFileW(
            str(path), access, share, None, OPEN_EXISTING, FILE_ATTRIBUTE_NORMAL, None
        )
        if handle is None or handle == self._invalid_handle:
            raise self._last_error(f"CreateFileW {path}")
        return handle

    def _last_error(self, operation: str) -> AttributeCopyError:
        code = self._ctypes.get_last_error()
        return AttributeCopyError(f"{operation}: {self._ctypes.FormatError(code)} (код {code})")

    def propagate(self, source: Path, destination: Path) -> None:
        creation_time = self._wintypes.FILETIME()
        access_time = self._wintypes.FILETIME()
        write_time = self._wintypes.FILETIME()
        byref = self._ctypes.byref

        src_handle = self._open(source, GENERIC_READ, FILE_SHARE_READ)
        try:
            if not self._kernel32.GetFileTime(
                src_handle, byref(creation_time), byref(access_time), byref(write_time)
            ):
                raise self._last_error("GetFileTime")
        finally:
            self._kernel32.CloseHandle(src_handle)

        dst_handle = self._open(destination, GENERIC_WRITE, 0)
        try:
            if not self._kernel32.SetFileTime(
                dst_handle, byref(creation_time), byref(access_time), byref(write_time)
            ):
                raise self._last_error("SetFileTime")
            if not self._kernel32.FlushFileBuffers(dst_handle):
                raise self._last_error("FlushFileBuffers")
        finally:
            self._kernel32.CloseHandle(dst_handle)


def select_propagator(enabled: bool, os_name: Optional[str] = None) -> AttributePropagator:
    """
    Выбирает реализацию переноса атрибутов.

    Args:
        enabled: Включен ли перенос атрибутов
        os_name: Имя платформы (по умолчанию sys.platform)

    Returns:
        AttributePropagator: Выбранная реализация
    """
    if not enabled:
        return NoOpPropagator()

    os_name = (os_name or sys.platform).lower()
    if os_name.startswith('win'):
        return WindowsFileTimePropagator()
    return StatPropagator()
