# logger_utils.py - status lines, metrics and timings for the CLI

import os
import time
from datetime import datetime
from typing import Optional

from colorama import Fore, Style
from colorama import just_fix_windows_console

# Path to the default log file, can be overridden per Log instance
DEFAULT_LOG_PATH = os.path.join("logs", "markov_model.log")


class Log:
    """Lightweight logger for writing messages and tracking metrics."""
    COLORS = {
        "DEBUG": Style.DIM,
        "INFO": Fore.BLUE,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
    }

    def __init__(self, path: Optional[str] = None, use_color: bool = True, echo: bool = True):
        self.path = path or DEFAULT_LOG_PATH
        self.use_color = use_color
        self.echo = echo
        if use_color:
            just_fix_windows_console()

    def write(self, level: str, msg: str) -> str:
        """
        Append a log message to the log file with a timestamp.
        Each entry is written as: [YYYY-MM-DD HH:MM:SS] LEVEL   | message
        """
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {level:<7} | {msg}"
        _append(self.path, line)

        if self.echo:
            if self.use_color and level in self.COLORS:
                print(f"{self.COLORS[level]}{line}{Style.RESET_ALL}")
            else:
                print(line)
        return line

    # Public logging methods
    def debug(self, msg: str) -> str:
        return self.write("DEBUG", msg)

    def info(self, msg: str) -> str:
        return self.write("INFO", msg)

    def warning(self, msg: str) -> str:
        return self.write("WARNING", msg)

    def error(self, msg: str) -> str:
        return self.write("ERROR", msg)

    @staticmethod
    def metric(tag, value, unit="", path: Optional[str] = None) -> str:
        """
        Record a metric (timing, counts).
        Example: [12:45:02] train done: 0.123s
        """
        ts = datetime.now().strftime("%H:%M:%S")
        line = f"[{ts}] {tag}: {value}{unit}"
        print(line)
        _append(path or DEFAULT_LOG_PATH, line)
        return line

    @staticmethod
    def time_block(label, path: Optional[str] = None):
        """
        Measure a code block and record its duration as a metric:
            with Log.time_block("train"):
                model.train_many(seqs)
        """
        return _Timer(label, path)


def _append(path: str, line: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(line + "\n")


class _Timer:
    """Context manager used by Log.time_block."""
    def __init__(self, label, path=None):
        self.label = label
        self.path = path
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = round(time.perf_counter() - self.start, 3)
        if exc_type is None:
            Log.metric(f"{self.label} done", self.elapsed, "s", path=self.path)
        return False
