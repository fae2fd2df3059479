"""Helpers for loading data and reporting results."""

from .data_loading import load_csv_dataset
from .formatting import format_generation_report
from .formatting import format_individual

__all__ = ["load_csv_dataset", "format_individual", "format_generation_report"]
