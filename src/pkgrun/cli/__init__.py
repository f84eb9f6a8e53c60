"""CLI package.

The ``cli`` sub-package contains the Click application. It is the only
place that prints or chooses exit codes; the core modules report back
through ``RunOutcome`` and exceptions.
"""
from __future__ import annotations
