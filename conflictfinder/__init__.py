"""
conflictfinder - Detect calendar event conflicts and suggest alternative times.
"""

__version__ = "0.1.0"
