"""Scenario ingestion adapters."""

from esstax.ingestion.base import BaseAdapter, Scenario
from esstax.ingestion.manual import ManualAdapter

__all__ = ["BaseAdapter", "ManualAdapter", "Scenario"]
