"""
Command and query dispatch conventions.

- ICommand / AbstractCommand: state-changing operations, no result
- IQuery / AbstractQuery: read-only operations with one result

Both are sent through an architecture:
    architecture.send_command(AddScoreCommand(5))
    total = architecture.send_query(TotalScoreQuery())
"""
from .base import ICommand, AbstractCommand, IQuery, AbstractQuery

__all__ = [
    "ICommand",
    "AbstractCommand",
    "IQuery",
    "AbstractQuery",
]
