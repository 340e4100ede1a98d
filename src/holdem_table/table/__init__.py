"""Table session runners."""

from holdem_table.table.session import SessionResult, TableSession

__all__ = ["SessionResult", "TableSession"]
