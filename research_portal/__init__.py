"""
Research Portal: financial document extraction and analyst reports.
"""

__version__ = "1.0.0"
