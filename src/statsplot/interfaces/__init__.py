"""Table-based interfaces for computing and writing statistics."""

from statsplot.interfaces.loader import load_long_table, load_table, load_wide_table
from statsplot.interfaces.models import SummaryConfig, SummaryOutput, TableInput
from statsplot.interfaces.runner import load_config, run_summary, summarize_table, write_output

__all__ = [
    "SummaryConfig",
    "SummaryOutput",
    "TableInput",
    "load_config",
    "load_long_table",
    "load_table",
    "load_wide_table",
    "run_summary",
    "summarize_table",
    "write_output",
]
