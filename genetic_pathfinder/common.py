#!/usr/bin/env python3
"""
Common Utilities for GA Components
Logging setup shared by the library and the command line planner
"""

import sys
import logging


def setup_logging(level=logging.INFO):
    """Set up logging configuration"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
