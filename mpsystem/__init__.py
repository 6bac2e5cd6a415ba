"""Application, window and watchdog managers for systems built of many applications."""

__version__ = "1.0.0"