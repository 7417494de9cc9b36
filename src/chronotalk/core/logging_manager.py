"""Centralized Logging Management for ChronoTalk

Every module asks the manager for its logger. Nothing is emitted until a
host application calls ``LoggingManager.configure``; until then the package
logger only carries a ``NullHandler``.
"""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Dict, Optional

PACKAGE_LOGGER = "chronotalk"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""
    
    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }
    
    def format(self, record):
        """Format log record with colors for console output."""
        log_message = super().format(record)
        return f"{self.COLORS.get(record.levelname, '')}{log_message}{self.COLORS['RESET']}"


class LoggingManager:
    """Centralized logging configuration and management."""
    
    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False
    
    def __new__(cls) -> 'LoggingManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self):
        """Initialize logging manager (only once)."""
        if self._initialized:
            return
            
        self.loggers: Dict[str, logging.Logger] = {}
        self.handlers: list = []
        
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addHandler(logging.NullHandler())
        self._initialized = True
        
    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger with the specified name.
        
        Args:
            name: Logger name (typically __name__ of the module)
            
        Returns:
            Logger instance
        """
        manager = cls()
        if name in manager.loggers:
            return manager.loggers[name]
            
        logger = logging.getLogger(name)
        manager.loggers[name] = logger
        return logger
    
    @classmethod
    def configure(
        cls,
        level: str = "INFO",
        log_to_console: bool = True,
        file_path: Optional[str] = None,
        max_file_size: str = "10MB",
        backup_count: int = 5
    ) -> 'LoggingManager':
        """Attach console and file handlers to the package logger.
        
        Calling this again replaces the handlers installed by the previous
        call.
        
        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_console: Whether to log to stdout with colors
            file_path: Optional rotating log file
            max_file_size: Rotation size such as "10MB"
            backup_count: Number of rotated files to keep
        """
        manager = cls()
        numeric_level = cls._numeric_level(level)
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(numeric_level)
        
        for handler in manager.handlers:
            package_logger.removeHandler(handler)
            handler.close()
        manager.handlers = []
        
        if log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(numeric_level)
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            package_logger.addHandler(console_handler)
            manager.handlers.append(console_handler)
            
        if file_path:
            log_file = Path(file_path)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=parse_file_size(max_file_size),
                backupCount=backup_count
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            package_logger.addHandler(file_handler)
            manager.handlers.append(file_handler)
            
        return manager
        
    def set_log_level(self, level: str):
        """Set the logging level for the package logger and its handlers.
        
        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = self._numeric_level(level)
        logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)
        for handler in self.handlers:
            if isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) is sys.stdout:
                handler.setLevel(numeric_level)
    
    @staticmethod
    def _numeric_level(level: str) -> int:
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')
        return numeric_level


def parse_file_size(size: str) -> int:
    """Convert "10MB" style sizes to bytes."""
    match = re.match(r'^(\d+)([KMG])B$', size.strip().upper())
    if not match:
        raise ValueError(f"Invalid file size: {size}")
    multiplier = {'K': 1024, 'M': 1024 ** 2, 'G': 1024 ** 3}[match.group(2)]
    return int(match.group(1)) * multiplier
