"""
pastenote - anonymous markdown notes

Notes are published without an account, optionally protected by an edit
password, and count their views in memory between periodic flushes.

Version: 1.0.0
"""

__version__ = "1.0.0"
