"""
datecopy

Утилита для копирования файлов в каталоги по дате изменения (YYYY.MM.DD).
"""

__version__ = "1.0.0"
__description__ = "Utility for copying files into date-based folders"
