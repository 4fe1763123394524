"""Core domain layer - entities, interfaces, and exceptions."""

from invoice_analytics.core import entities, exceptions, interfaces

__all__ = ["entities", "interfaces", "exceptions"]
