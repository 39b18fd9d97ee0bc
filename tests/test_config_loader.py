"""
Тесты для модуля config_loader.py
"""

import dataclasses
import json
import pytest
from pathlib import Path

from datecopy.config_loader import (
    ConfigLoader,
    CopyConfig,
    CopyDefaults,
    MAX_BUFFER_SIZE_MB,
    MEGABYTE,
    load_config,
    default_settings,
)


VALID_CONFIG = """[copy]
buffer_size_mb = 4
preserve_attributes = false
pause_on_exit = true

[logging]
level = DEBUG
log_file = logs/test.log
max_log_size = 2
backup_count = 1
"""


def write_config(directory: Path, text: str) -> Path:
    path = directory / "settings.ini"
    path.write_text(text, encoding="utf-8")
    return path


class TestConfigLoader:
    """Тесты для класса ConfigLoader."""

    def test_load_config_success(self, tmp_path):
        """Тест успешной загрузки конфигурации."""
        config = load_config(str(write_config(tmp_path, VALID_CONFIG)))

        assert config.copy.buffer_size_mb == 4
        assert config.copy.preserve_attributes is False
        assert config.copy.pause_on_exit is True

        assert config.logging.level == "DEBUG"
        assert config.logging.log_file == Path("logs/test.log")
        assert config.logging.max_log_size == 2
        assert config.logging.backup_count == 1

    def test_copy_section_is_optional(self, tmp_path):
        """Тест загрузки без секции [copy]."""
        path = write_config(tmp_path, "[logging]\nlevel = INFO\n")

        config = load_config(str(path))

        assert config.copy == CopyDefaults()
        assert config.logging.log_file == Path("logs/datecopy.log")

    def test_config_file_not_found(self, tmp_path):
        """Тест ошибки при отсутствии явно указанного файла."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nonexistent_config.ini"))

    def test_default_settings_without_file(self, tmp_path, monkeypatch):
        """Без файла по умолчанию используются встроенные настройки."""
        monkeypatch.chdir(tmp_path)

        assert load_config() == default_settings()

    def test_default_path_used_when_present(self, tmp_path, monkeypatch):
        """Тест чтения config/settings.ini из текущего каталога."""
        (tmp_path / "config").mkdir()
        write_config(tmp_path / "config", VALID_CONFIG)
        monkeypatch.chdir(tmp_path)

        assert load_config().copy.buffer_size_mb == 4

    def test_missing_logging_section(self, tmp_path):
        """Тест ошибки при отсутствии секции логирования."""
        path = write_config(tmp_path, "[copy]\nbuffer_size_mb = 1\n")

        with pytest.raises(ValueError, match="Секция 'logging' не найдена"):
            load_config(str(path))

    def test_invalid_buffer_size(self, tmp_path):
        """Тест валидации некорректного размера буфера."""
        path = write_config(tmp_path, VALID_CONFIG.replace("buffer_size_mb = 4", "buffer_size_mb = 0"))

        with pytest.raises(ValueError, match="Размер буфера должен быть от 1 до"):
            load_config(str(path))

    def test_buffer_size_above_limit(self, tmp_path):
        path = write_config(tmp_path, VALID_CONFIG.replace("buffer_size_mb = 4", "buffer_size_mb = 100000"))

        with pytest.raises(ValueError, match="Размер буфера"):
            load_config(str(path))

    def test_non_numeric_buffer_size(self, tmp_path):
        """Тест ошибки при нечисловом размере буфера."""
        path = write_config(tmp_path, VALID_CONFIG.replace("buffer_size_mb = 4", "buffer_size_mb = big"))

        with pytest.raises(ValueError, match="Ошибка загрузки конфигурации"):
            load_config(str(path))

    def test_invalid_log_level(self, tmp_path):
        """Тест валидации некорректного уровня логирования."""
        path = write_config(tmp_path, VALID_CONFIG.replace("level = DEBUG", "level = INVALID_LEVEL"))

        with pytest.raises(ValueError, match="Некорректный уровень логирования"):
            load_config(str(path))

    def test_get_config_before_load(self):
        """Тест получения конфигурации до загрузки."""
        loader = ConfigLoader("whatever.ini")

        with pytest.raises(ValueError, match="Конфигурация не загружена"):
            loader.get_config()

    def test_get_config_after_load(self, tmp_path):
        loader = ConfigLoader(str(write_config(tmp_path, VALID_CONFIG)))
        loaded = loader.load_config()

        assert loader.get_config() is loaded


class TestCopyConfig:
    """Тесты для CopyConfig."""

    def test_defaults(self):
        config = CopyConfig(source="in", destination="out", extension=".jpg")

        assert config.overwrite is False
        assert config.recursive is False
        assert config.buffer_size == MEGABYTE
        assert config.preserve_attributes is True

    def test_is_read_only(self):
        """Конфигурация не меняется после создания."""
        config = CopyConfig(source="in", destination="out", extension=".jpg")

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.overwrite = True

    @pytest.mark.parametrize("buffer_size", [0, -1, MAX_BUFFER_SIZE_MB * MEGABYTE + 1])
    def test_buffer_size_out_of_range(self, buffer_size):
        with pytest.raises(ValueError, match="Размер буфера"):
            CopyConfig(source="in", destination="out", extension=".jpg", buffer_size=buffer_size)

    def test_to_json(self):
        """Тест вывода конфигурации в JSON."""
        config = CopyConfig(
            source="D:/Фото",
            destination="E:/out",
            extension=".JPG",
            overwrite=True,
            os_name="win32"
        )

        data = json.loads(config.to_json())

        assert data["source"] == "D:/Фото"
        assert data["destination"] == "E:/out"
        assert data["extension"] == ".JPG"
        assert data["overwrite"] is True
        assert data["recursive"] is False
        assert data["buffer_size"] == MEGABYTE
        assert data["os_name"] == "win32"
        assert "Фото" in config.to_json()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
