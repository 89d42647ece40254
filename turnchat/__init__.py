"""
Turn-Chat application package.

This package contains the completion API client, the local settings store,
and the Qt UI used to edit conversation turns and read the replies.
"""

from .config import AppConfig
