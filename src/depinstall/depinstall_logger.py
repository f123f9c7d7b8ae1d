"""
Logger used across depinstall.
"""

import logging


class DepInstallLogger:
    """
    Thin wrapper over the standard logging module.

    Components receive an instance of this class and call `log(message, level)`
    rather than talking to `logging` directly, so a harness can swap in its own
    sink by subclassing.
    """

    def __init__(self, name: str = "depinstall") -> None:
        self.logger = logging.getLogger(name)

    def log(self, debug_message: str, level: int, sanitized_error_message: str = "") -> None:
        """
        Log the message at the given level. When a sanitized message is given,
        it replaces the raw one (e.g. to keep credentials in URIs out of logs).
        """
        message = sanitized_error_message or debug_message
        self.logger.log(level=level, msg=message)
