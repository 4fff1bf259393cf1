"""Scheduled background jobs."""

from .ledger_audit import register_scheduler

__all__ = ["register_scheduler"]
