"""Base adapter interface for scenario ingestion."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from esstax.models.events import ShareSaleEvent, VestingEvent


@dataclass
class Scenario:
    """A vesting event (if known) and the sales made against it."""

    vesting: VestingEvent | None = None
    sales: list[ShareSaleEvent] = field(default_factory=list)


class BaseAdapter(ABC):
    """Abstract base class for all ingestion adapters."""

    @abstractmethod
    def parse(self, file_path: Path) -> Scenario:
        """Parse a file and return a Scenario with typed models."""
        ...

    @abstractmethod
    def validate(self, scenario: Scenario) -> list[str]:
        """Validate parsed data. Returns a list of validation error messages."""
        ...
