"""
Waitlist models package
"""

from .waitlist import WaitlistEntry, WaitlistTable, table_from_document, table_to_document

__all__ = ["WaitlistEntry", "WaitlistTable", "table_from_document", "table_to_document"]
