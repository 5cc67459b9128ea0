"""
Logging helper module for terminal-first logging.
All output goes to stdout with formatted prefixes, and also to a log file.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

# Get project root directory
_project_root = Path(__file__).parent.parent
_log_dir = _project_root / "logs"

# Opened on first write so importing the package has no filesystem side effects
_log_file_path: Optional[Path] = None
_log_file: Optional[TextIO] = None
_log_file_failed = False


def _open_log_file() -> Optional[TextIO]:
    global _log_file, _log_file_path, _log_file_failed
    if _log_file is not None or _log_file_failed:
        return _log_file
    try:
        _log_dir.mkdir(parents=True, exist_ok=True)
        _log_file_path = _log_dir / f"eventcal_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        _log_file = open(_log_file_path, 'a', encoding='utf-8')
    except OSError as err:
        # stdout only from here on
        _log_file_failed = True
        print(f"[WARN] Unable to open log file in {_log_dir}: {err}")
    return _log_file


def _log(message: str):
    """Write message to both stdout and log file."""
    print(message)
    log_file = _open_log_file()
    if log_file is not None:
        log_file.write(message + '\n')
        log_file.flush()


class Log:
    """Simple logging class that outputs to stdout and log file with formatted prefixes."""

    @staticmethod
    def section(title: str):
        """Print a section header: blank line + '===== TITLE ====='"""
        _log("")
        _log(f"===== {title} =====")

    @staticmethod
    def info(message: str):
        """Print an info message: '[INFO] message'"""
        _log(f"[INFO] {message}")

    @staticmethod
    def warn(message: str):
        """Print a warning message: '[WARN] message'"""
        _log(f"[WARN] {message}")

    @staticmethod
    def error(message: str):
        """Print an error message: '[ERROR] message'"""
        _log(f"[ERROR] {message}")

    @staticmethod
    def kv(pairs: dict):
        """
        Print key-value pairs: '[KV] key=value | key2=value2'

        Args:
            pairs: Dictionary of key-value pairs to print
        """
        kv_string = " | ".join([f"{k}={v}" for k, v in pairs.items()])
        _log(f"[KV] {kv_string}")

    @staticmethod
    def get_log_path() -> Optional[str]:
        """Get the path to the current log file (None until the first write)."""
        return str(_log_file_path) if _log_file_path is not None else None

    @staticmethod
    def set_log_dir(log_dir) -> None:
        """
        Redirect the log file to another directory.
        The current file is closed; a new one is opened on the next write.
        """
        global _log_dir, _log_file, _log_file_path, _log_file_failed
        if _log_file is not None:
            _log_file.close()
        _log_dir = Path(log_dir)
        _log_file = None
        _log_file_path = None
        _log_file_failed = False
