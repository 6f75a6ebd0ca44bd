#!/usr/bin/env python3
"""
Genetic Path Finder Exceptions
Errors raised before a search starts (structural configuration problems)
"""


class ConfigurationError(ValueError):
    """Raised when a search cannot start: bad parameters or unknown endpoints"""
