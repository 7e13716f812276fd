"""Report generation for ESS tax results."""

from esstax.reports.ess_summary import CapitalGainsReportGenerator, EssSummaryGenerator

__all__ = [
    "CapitalGainsReportGenerator",
    "EssSummaryGenerator",
]
