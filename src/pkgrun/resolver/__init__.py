"""Script resolver.

Maps an ``Invocation`` onto one of ``ListAll``, ``RunScript`` or
``ReportUnknownScript``.
"""
from __future__ import annotations

from pkgrun.resolver.resolver import (
    Invocation,
    ListAll,
    ReportUnknownScript,
    ResolvedAction,
    RunScript,
    resolve,
)

__all__ = [
    "Invocation",
    "ListAll",
    "ReportUnknownScript",
    "ResolvedAction",
    "RunScript",
    "resolve",
]
