from .logger import LogContext, get_logger, log_event, setup_logging
from .metrics import MetricsCollector

__all__ = ["LogContext", "get_logger", "log_event", "setup_logging", "MetricsCollector"]
