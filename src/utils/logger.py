"""
Structured Logging for AiRS Order Documents
Rotating file logs (all messages + errors only) plus console output.
Every message carries an optional [Component] prefix.
"""
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler


LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

ERROR_LOG_MAX_MB = 5
ERROR_LOG_BACKUPS = 3


def _rotating_file(path, level, max_mb, backups, formatter):
    handler = RotatingFileHandler(
        path,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backups,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


class DocsLogger:
    """Component-tagged logger for the document pipeline and API"""

    def __init__(self, name="Order-Documents", log_dir="logs", log_level="INFO",
                 max_mb=10, backup_count=5):
        """
        Args:
            name: Underlying logging.Logger name
            log_dir: Directory holding order_documents.log and errors.log
            log_level: Threshold for the logger (DEBUG ... CRITICAL)
            max_mb: Size of order_documents.log before it rotates
            backup_count: Rotated order_documents.log files kept
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
        # Re-initialising (tests, config reload) must not duplicate output
        self.logger.handlers.clear()
        self.logger.propagate = False

        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        self.logger.addHandler(_rotating_file(
            directory / 'order_documents.log', logging.DEBUG, max_mb, backup_count, formatter))
        self.logger.addHandler(_rotating_file(
            directory / 'errors.log', logging.ERROR, ERROR_LOG_MAX_MB, ERROR_LOG_BACKUPS, formatter))

        console = logging.StreamHandler()
        console.setLevel(logging.INFO)
        console.setFormatter(formatter)
        self.logger.addHandler(console)

    def debug(self, message, component=""):
        self._emit(logging.DEBUG, message, component)

    def info(self, message, component=""):
        self._emit(logging.INFO, message, component)

    def warning(self, message, component=""):
        self._emit(logging.WARNING, message, component)

    def error(self, message, component="", exc_info=False):
        self._emit(logging.ERROR, message, component, exc_info)

    def critical(self, message, component="", exc_info=False):
        self._emit(logging.CRITICAL, message, component, exc_info)

    def _emit(self, level, message, component="", exc_info=False):
        text = f"[{component}] {message}" if component else message
        self.logger.log(level, text, exc_info=exc_info)
        # Flush so tail -f on the log files sees each export as it happens
        for handler in self.logger.handlers:
            handler.flush()

    # ── Pipeline events ──────────────────────────────────────────

    def log_export_start(self, kind, identifier):
        """e.g. 'Invoice ORD-A1B2C3D4 - Export started'"""
        self.info(f"{kind} {identifier} - Export started", component="Export")

    def log_export_complete(self, kind, identifier, path, processing_time):
        self.info(
            f"{kind} {identifier} - Written to {path} in {processing_time:.2f}s",
            component="Export"
        )

    def log_lookup_degraded(self, order_id, lookup_name, reason):
        """A satellite lookup fell back to its default value"""
        self.warning(
            f"Order {order_id} - {lookup_name} lookup unavailable ({reason}); using fallback",
            component="Lookup"
        )


_global_logger = None


def get_logger(log_level=None):
    """Process-wide DocsLogger configured from config.py on first use"""
    global _global_logger
    if _global_logger is None:
        import config
        _global_logger = DocsLogger(
            log_dir=config.LOG_DIR,
            log_level=log_level or config.LOG_LEVEL,
            max_mb=config.LOG_FILE_MAX_MB,
            backup_count=config.LOG_FILE_BACKUP_COUNT,
        )
    return _global_logger
