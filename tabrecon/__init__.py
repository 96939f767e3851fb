"""
tabrecon - key-based reconciliation of two tabular datasets.
"""

__version__ = "1.0.0"

from .core.dataset import Dataset, Side
from .core.reconciler import Reconciler, ReconciliationResult, reconcile
from .config.options import ReconcileOptions
from .config.manager import ConfigManager, DatasetConfig, ReconciliationConfig
from .adapters.file_reader import UniversalFileReader, parse_text_to_dataset
from .reporting.exporter import ResultExporter
from .utils.logger import get_logger

__all__ = [
    "Dataset",
    "Side",
    "Reconciler",
    "ReconciliationResult",
    "reconcile",
    "ReconcileOptions",
    "ConfigManager",
    "DatasetConfig",
    "ReconciliationConfig",
    "UniversalFileReader",
    "parse_text_to_dataset",
    "ResultExporter",
    "get_logger",
]
