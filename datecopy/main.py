"""
Главный модуль CLI интерфейса утилиты копирования файлов по датам.

Запрашивает параметры копирования, выводит текущую конфигурацию,
копирует файлы и печатает итоговую статистику.
"""

import argparse
import sys
from typing import Callable, Optional

try:
    from .config_loader import load_config
    from .logger import FileCopyLogger
    from .copier import create_copier, CopyStats
    from .file_ops import FileOperationError
    from .prompts import ParameterCollector
except ImportError:
    from config_loader import load_config
    from logger import FileCopyLogger
    from copier import create_copier, CopyStats
    from file_ops import FileOperationError
    from prompts import ParameterCollector


BANNER = r"""
     _       _
  __| | __ _| |_ ___  ___ ___  _ __  _   _
 / _` |/ _` | __/ _ \/ __/ _ \| '_ \| | | |
| (_| | (_| | ||  __/ (_| (_) | |_) | |_| |
 \__,_|\__,_|\__\___|\___\___/| .__/ \__, |
                              |_|    |___/
"""


class DateCopyCLI:
    """Класс для обработки команд CLI."""

    def __init__(self, reader: Callable[[str], str] = input):
        self.settings = None
        self.logger = None
        self.reader = reader

    def setup(self, config_path: Optional[str] = None) -> bool:
        """
        Загружает настройки и настраивает логирование.

        Args:
            config_path: Путь к файлу конфигурации

        Returns:
            bool: True если инициализация успешна
        """
        try:
            self.settings = load_config(config_path)
            self.logger = FileCopyLogger(self.settings.logging)
            self.logger.log_system_info(f"Конфигурация загружена из: {config_path or 'настроек по умолчанию'}")
            return True

        except (OSError, ValueError) as e:
            print(f"❌ Ошибка инициализации: {e}")
            return False

    def cmd_copy(self, args) -> int:
        """
        Команда копирования файлов.

        Args:
            args: Аргументы командной строки

        Returns:
            int: Код возврата (0 - успех, 1 - ошибка)
        """
        print(BANNER)

        collector = ParameterCollector(self.settings.copy, reader=self.reader)
        config = collector.collect(
            source=args.source,
            destination=args.dest,
            extension=args.ext,
            buffer_size_mb=args.buffer_size,
            overwrite=args.overwrite,
            recursive=args.recursive,
            preserve_attributes=args.preserve_attributes
        )

        print(f"⚙️ Текущая конфигурация:\n{config.to_json()}")
        self.logger.log_config(config.to_json())

        try:
            copier = create_copier(config, self.logger)
            self.logger.log_system_info(f"Перенос атрибутов: {copier.propagator.name}")
            stats = copier.run()
        except FileOperationError as e:
            print(f"❌ Ошибка копирования: {e}")
            return 1

        self.print_summary(stats)
        return 0 if stats.errors == 0 else 1

    @staticmethod
    def print_summary(stats: CopyStats) -> None:
        """Печатает итоговую статистику."""
        print("\n=== Операция завершена ===")
        print(f"   • Скопировано: {stats.copied}")
        print(f"   • Пропущено: {stats.skipped}")
        print(f"   • Перезаписано: {stats.overwritten}")
        print(f"   • Ошибок: {stats.errors}")

        duration = stats.get_duration()
        if duration is not None:
            print(f"   • Продолжительность: {duration:.2f} сек")

        if stats.error_details:
            print(f"\n⚠️ Обнаружено {len(stats.error_details)} ошибок:")
            for error in stats.error_details[:10]:
                print(f"   • {error['file']}: {error['error']}")
            if len(stats.error_details) > 10:
                print(f"   ... и еще {len(stats.error_details) - 10} ошибок")

    def pause(self) -> None:
        """Ждет Enter перед выходом, если это включено в настройках."""
        if self.settings and self.settings.copy.pause_on_exit:
            try:
                self.reader("Нажмите Enter для выхода...")
            except EOFError:
                pass

    def cleanup(self) -> None:
        if self.logger:
            self.logger.close()


def create_parser() -> argparse.ArgumentParser:
    """
    Создает парсер аргументов командной строки.

    Returns:
        argparse.ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog='datecopy',
        description="Копирование файлов в каталоги по дате изменения (YYYY.MM.DD)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Параметры, не указанные в командной строке, запрашиваются интерактивно.

Примеры использования:

  # Интерактивный режим
  datecopy

  # Копирование jpg с перезаписью
  datecopy --source D:/camera --dest E:/photos --ext .jpg --overwrite

  # Рекурсивный обход без переноса атрибутов
  datecopy --source ./in --dest ./out --ext .png --recursive --no-preserve-attributes
        """
    )

    parser.add_argument(
        '--config',
        default=None,
        help='Путь к файлу конфигурации (по умолчанию: config/settings.ini, если он есть)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод'
    )

    parser.add_argument('--source', help='Исходный каталог')
    parser.add_argument('--dest', help='Каталог назначения')
    parser.add_argument('--ext', help='Расширение файлов, без учета регистра')
    parser.add_argument(
        '--buffer-size',
        type=int,
        help='Размер буфера копирования в МБ'
    )
    parser.add_argument(
        '--overwrite',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Перезаписывать существующие файлы'
    )
    parser.add_argument(
        '--recursive',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Обходить вложенные каталоги'
    )
    parser.add_argument(
        '--preserve-attributes',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Переносить время создания, доступа и изменения файла'
    )

    return parser


def main(argv=None, reader: Callable[[str], str] = input) -> int:
    """Главная функция CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    cli = DateCopyCLI(reader=reader)

    if not cli.setup(args.config):
        return 1

    if args.verbose:
        cli.logger.get_logger().setLevel('DEBUG')
        for handler in cli.logger.get_logger().handlers:
            handler.setLevel('DEBUG')

    try:
        return cli.cmd_copy(args)

    except KeyboardInterrupt:
        print("\n⚠️ Операция прервана пользователем")
        return 1
    except Exception as e:
        print(f"❌ Неожиданная ошибка: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1
    finally:
        cli.pause()
        cli.cleanup()


if __name__ == "__main__":
    sys.exit(main())
