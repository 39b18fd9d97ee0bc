"""
Тесты для модуля logger.py
"""

import logging
import pytest
from pathlib import Path
from unittest.mock import patch

from datecopy.logger import (
    FileCopyLogger,
    setup_logger,
    get_logger,
    ColoredFormatter,
    LOGGER_NAME,
)
from datecopy.config_loader import LoggingConfig


class TestColoredFormatter:
    """Тесты для ColoredFormatter."""

    def make_record(self, level=logging.INFO):
        return logging.LogRecord(
            name='test',
            level=level,
            pathname='',
            lineno=0,
            msg='Test message',
            args=(),
            exc_info=None
        )

    def test_colored_formatter(self):
        """Тест цветного форматтера."""
        formatter = ColoredFormatter(fmt='[%(levelname)s] %(message)s')

        formatted = formatter.format(self.make_record())

        assert '\033[32m' in formatted  # Зеленый цвет для INFO
        assert '\033[0m' in formatted
        assert 'Test message' in formatted
        assert 'INFO' in formatted

    def test_warning_is_yellow(self):
        formatter = ColoredFormatter(fmt='%(levelname)s %(message)s')

        assert '\033[33m' in formatter.format(self.make_record(logging.WARNING))

    def test_record_levelname_restored(self):
        """Файловый обработчик должен получить уровень без цвета."""
        formatter = ColoredFormatter(fmt='%(levelname)s')
        record = self.make_record()

        formatter.format(record)

        assert record.levelname == 'INFO'


class TestFileCopyLogger:
    """Тесты для FileCopyLogger."""

    @pytest.fixture
    def temp_log_config(self, tmp_path):
        """Создает временную конфигурацию логирования."""
        config = LoggingConfig(
            level='DEBUG',
            log_file=tmp_path / 'logs' / 'test.log',
            max_log_size=1,
            backup_count=3
        )

        yield config

        logger = logging.getLogger(LOGGER_NAME)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def test_logger_initialization(self, temp_log_config):
        """Тест инициализации логгера."""
        logger = FileCopyLogger(temp_log_config)

        assert logger.logger is not None
        assert logger.logger.name == LOGGER_NAME
        assert logger.logger.level == logging.DEBUG
        assert logger.logger.propagate is False
        assert Path(temp_log_config.log_file).parent.exists()

    def test_logger_handlers(self, temp_log_config):
        """Тест обработчиков логгера."""
        logger = FileCopyLogger(temp_log_config)
        handler_types = [type(h).__name__ for h in logger.logger.handlers]

        assert len(handler_types) == 2
        assert 'RotatingFileHandler' in handler_types
        assert 'StreamHandler' in handler_types

    def test_repeated_setup_does_not_duplicate_handlers(self, temp_log_config):
        FileCopyLogger(temp_log_config)
        logger = FileCopyLogger(temp_log_config)

        assert len(logger.logger.handlers) == 2

    def test_messages_written_to_file(self, temp_log_config):
        logger = FileCopyLogger(temp_log_config)

        logger.log_file_copied("a.jpg", "2024.03.07")
        logger.close()

        content = Path(temp_log_config.log_file).read_text(encoding='utf-8')
        assert "copy: a.jpg → 2024.03.07" in content
        assert '\033[' not in content

    def test_log_copy_start(self, temp_log_config):
        """Тест логирования начала копирования."""
        logger = FileCopyLogger(temp_log_config)

        with patch.object(logger.logger, 'info') as mock_info:
            logger.log_copy_start(12, Path("src"), Path("dst"))

            calls = [call[0][0] for call in mock_info.call_args_list]
            assert mock_info.call_count == 3
            assert any("Найдено файлов: 12" in call for call in calls)

    def test_log_copy_end(self, temp_log_config):
        """Тест логирования итоговой статистики."""
        logger = FileCopyLogger(temp_log_config)

        with patch.object(logger.logger, 'info') as mock_info:
            logger.log_copy_end(copied=5, skipped=2, overwritten=1, errors=3)

            calls = [call[0][0] for call in mock_info.call_args_list]
            assert any("Скопировано: 5" in call for call in calls)
            assert any("Пропущено: 2" in call for call in calls)
            assert any("Перезаписано: 1" in call for call in calls)
            assert any("Ошибок: 3" in call for call in calls)

    def test_copy_end_written_to_file_only(self, temp_log_config, capsys):
        """Итоги попадают в файл, но не в консоль."""
        logger = FileCopyLogger(temp_log_config)

        logger.log_file_copied("a.jpg", "2024.03.07")
        logger.log_copy_end(copied=5, skipped=2, overwritten=1, errors=3)
        logger.close()

        out = capsys.readouterr().out
        assert "copy: a.jpg" in out
        assert "Скопировано" not in out
        content = Path(temp_log_config.log_file).read_text(encoding='utf-8')
        assert "Скопировано: 5" in content
        assert "Ошибок: 3" in content

    def test_progress_lines(self, temp_log_config):
        """Тест строк прогресса copy/overwrite/skip."""
        logger = FileCopyLogger(temp_log_config)

        with patch.object(logger.logger, 'info') as mock_info, \
                patch.object(logger.logger, 'warning') as mock_warning:
            logger.log_file_copied("a.jpg", "2024.03.07")
            logger.log_file_overwritten("b.jpg", "2024.03.08")
            logger.log_file_skipped("c.jpg", "2024.03.09")

            assert "copy: a.jpg → 2024.03.07" in mock_info.call_args_list[0][0][0]
            assert "overwrite: b.jpg → 2024.03.08" in mock_info.call_args_list[1][0][0]
            assert "skip: c.jpg → 2024.03.09" in mock_warning.call_args[0][0]

    def test_log_file_error(self, temp_log_config):
        logger = FileCopyLogger(temp_log_config)

        with patch.object(logger.logger, 'error') as mock_error:
            logger.log_file_error("a.jpg", Exception("Test error"))

            mock_error.assert_called_once()
            assert "a.jpg" in mock_error.call_args[0][0]
            assert "Test error" in mock_error.call_args[0][0]

    def test_log_attribute_warning(self, temp_log_config):
        logger = FileCopyLogger(temp_log_config)

        with patch.object(logger.logger, 'warning') as mock_warning:
            logger.log_attribute_warning("a.jpg", Exception("access denied"))

            assert "access denied" in mock_warning.call_args[0][0]

    def test_log_critical_error(self, temp_log_config):
        logger = FileCopyLogger(temp_log_config)

        with patch.object(logger.logger, 'critical') as mock_critical:
            logger.log_critical_error("Critical error", Exception("Test exception"))
            logger.log_critical_error("Critical error")

            assert "Critical error: Test exception" in mock_critical.call_args_list[0][0][0]
            assert mock_critical.call_args_list[1][0][0].endswith("Critical error")

    def test_close_removes_handlers(self, temp_log_config):
        logger = FileCopyLogger(temp_log_config)

        logger.close()

        assert logger.logger.handlers == []

    def test_get_logger_not_initialized(self, temp_log_config):
        logger = FileCopyLogger(temp_log_config)
        logger.logger = None

        with pytest.raises(RuntimeError, match="Логгер не инициализирован"):
            logger.get_logger()


class TestLoggerFunctions:
    """Тесты для функций модуля logger."""

    def test_setup_logger(self, tmp_path):
        config = LoggingConfig(
            level='INFO',
            log_file=tmp_path / 'test.log',
            max_log_size=1,
            backup_count=1
        )

        logger = setup_logger(config)
        try:
            assert isinstance(logger, logging.Logger)
            assert logger.name == LOGGER_NAME
            assert logger.level == logging.INFO
        finally:
            for handler in logger.handlers[:]:
                handler.close()
                logger.removeHandler(handler)

    def test_get_logger(self):
        assert get_logger().name == LOGGER_NAME
        assert get_logger('custom').name == 'custom'


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
