"""
Configuration management.
Single responsibility: load, validate, and manage configuration.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field

from .options import ReconcileOptions
from ..utils.logger import get_logger


logger = get_logger()


DATASET_TYPES = ("auto", "csv", "tsv", "json", "excel", "parquet")
EMPTY_ROW_POLICIES = ("skip", "keep")


class ConfigError(ValueError):
    """Exception raised when a configuration entry is invalid."""
    pass


@dataclass
class DatasetConfig:
    """Configuration for a single dataset."""

    path: str
    name: str
    type: str = "auto"
    empty_rows: str = "skip"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.path:
            raise ConfigError(f"Dataset path is required: {self.name}")
        if not self.name:
            raise ConfigError("Dataset name is required")
        if self.type not in DATASET_TYPES:
            raise ConfigError(f"Unsupported dataset type '{self.type}' for {self.name}")
        if self.empty_rows not in EMPTY_ROW_POLICIES:
            raise ConfigError(f"empty_rows must be one of {EMPTY_ROW_POLICIES}: {self.name}")


@dataclass
class ReconciliationConfig:
    """
    Configuration for one A-vs-B reconciliation.

    Empty key_columns / compare_columns are filled in from the datasets'
    shared columns at run time. Flags left as None take engine defaults.
    """

    name: str
    dataset_a: str
    dataset_b: str
    key_columns: List[str] = field(default_factory=list)
    compare_columns: List[str] = field(default_factory=list)
    key_case_insensitive: Optional[bool] = None
    compare_case_insensitive: Optional[bool] = None
    numeric_tolerance: Optional[float] = None
    output_dir: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.dataset_a or not self.dataset_b:
            raise ConfigError(f"Reconciliation '{self.name}' needs both 'a' and 'b' datasets")
        if self.numeric_tolerance is not None:
            try:
                self.numeric_tolerance = float(self.numeric_tolerance)
            except (TypeError, ValueError):
                raise ConfigError(
                    f"numeric_tolerance must be a number: {self.numeric_tolerance!r}"
                )
            if self.numeric_tolerance < 0:
                raise ConfigError(
                    f"numeric_tolerance must be non-negative: {self.numeric_tolerance}"
                )

    def to_options(self) -> ReconcileOptions:
        """Engine options for this reconciliation."""
        return ReconcileOptions(
            key_columns=list(self.key_columns),
            compare_columns=list(self.compare_columns),
            key_case_insensitive=self.key_case_insensitive,
            compare_case_insensitive=self.compare_case_insensitive,
            numeric_tolerance=self.numeric_tolerance,
        )


class ConfigManager:
    """
    Manage application configuration.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path) if config_path else Path("reconcile.yaml")
        self.config: Dict[str, Any] = {}
        self.datasets: Dict[str, DatasetConfig] = {}
        self.reconciliations: List[ReconciliationConfig] = []

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If config is invalid YAML
            ConfigError: If an entry is invalid
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")

        logger.info("config.loading", file=str(self.config_path))

        with open(self.config_path, encoding="utf-8") as f:
            self.config = yaml.safe_load(f) or {}

        self._parse_datasets()
        self._parse_reconciliations()

        logger.info("config.loaded",
                   datasets=len(self.datasets),
                   reconciliations=len(self.reconciliations))

        return self.config

    def _resolve_path(self, path: str) -> str:
        """Relative paths are relative to the config file's directory."""
        p = Path(path)
        if p.is_absolute():
            return str(p)
        return str(self.config_path.parent / p)

    def _parse_datasets(self):
        """Parse dataset configurations."""
        for name, cfg in (self.config.get("datasets") or {}).items():
            try:
                cfg = cfg or {}
                self.datasets[name] = DatasetConfig(
                    name=name,
                    path=self._resolve_path(cfg["path"]) if cfg.get("path") else "",
                    type=cfg.get("type", "auto"),
                    empty_rows=cfg.get("empty_rows", "skip"),
                )
            except ConfigError as e:
                logger.error("config.dataset.invalid",
                           dataset=name,
                           error=str(e))
                raise

    def _parse_reconciliations(self):
        """Parse reconciliation configurations."""
        for i, rec in enumerate(self.config.get("reconciliations") or []):
            name = rec.get("name") or f"{rec.get('a')}_vs_{rec.get('b')}"
            try:
                reconciliation = ReconciliationConfig(
                    name=name,
                    dataset_a=rec.get("a"),
                    dataset_b=rec.get("b"),
                    key_columns=list(rec.get("key_columns") or []),
                    compare_columns=list(rec.get("compare_columns") or []),
                    key_case_insensitive=rec.get("key_case_insensitive"),
                    compare_case_insensitive=rec.get("compare_case_insensitive"),
                    numeric_tolerance=rec.get("numeric_tolerance"),
                    output_dir=self._resolve_path(rec["output_dir"]) if rec.get("output_dir") else None,
                )
                for ref in (reconciliation.dataset_a, reconciliation.dataset_b):
                    if ref not in self.datasets:
                        raise ConfigError(f"Reconciliation '{name}' references unknown dataset: {ref}")
                self.reconciliations.append(reconciliation)
            except ConfigError as e:
                logger.error("config.reconciliation.invalid",
                           reconciliation=name,
                           position=i,
                           error=str(e))
                raise

    def get_dataset(self, name: str) -> DatasetConfig:
        """
        Get dataset configuration by name.

        Args:
            name: Dataset name

        Returns:
            Dataset configuration

        Raises:
            KeyError: If dataset not found
        """
        if name not in self.datasets:
            raise KeyError(f"Dataset not found: {name}")
        return self.datasets[name]

    def save(self, path: Optional[Path] = None):
        """
        Save configuration to file.

        Args:
            path: Output path (uses original path if not specified)
        """
        output_path = Path(path) if path else self.config_path

        logger.info("config.saving", file=str(output_path))

        config_dict = {
            "datasets": {},
            "reconciliations": []
        }

        for name, dataset in self.datasets.items():
            config_dict["datasets"][name] = {
                "path": dataset.path,
                "type": dataset.type,
                "empty_rows": dataset.empty_rows,
            }

        for rec in self.reconciliations:
            entry = {
                "name": rec.name,
                "a": rec.dataset_a,
                "b": rec.dataset_b,
                "key_columns": rec.key_columns,
                "compare_columns": rec.compare_columns,
            }
            # unset flags stay unset so engine defaults keep applying
            for attr in ("key_case_insensitive", "compare_case_insensitive",
                         "numeric_tolerance", "output_dir"):
                value = getattr(rec, attr)
                if value is not None:
                    entry[attr] = value
            config_dict["reconciliations"].append(entry)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info("config.saved", file=str(output_path))


SAMPLE_CONFIG = """# tabrecon configuration
# ======================

datasets:
  # Paths are relative to this file
  invoices_a:
    path: "data/invoices_a.csv"
    type: "auto"        # auto | csv | tsv | json | excel | parquet
    empty_rows: "skip"  # skip | keep
  invoices_b:
    path: "data/invoices_b.csv"

reconciliations:
  - name: "invoices"
    a: "invoices_a"
    b: "invoices_b"
    key_columns: ["invoice_id"]
    compare_columns: ["invoice_date", "customer", "amount"]  # empty = shared non-key columns
    key_case_insensitive: true
    compare_case_insensitive: false
    numeric_tolerance: 0
    output_dir: "reports/invoices"
"""


def create_sample_config(output_path: Path) -> Path:
    """
    Create a sample configuration file.

    Args:
        output_path: Where to save the config

    Returns:
        The written path
    """
    output_path = Path(output_path)
    output_path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    logger.info("config.sample_created", file=str(output_path))
    return output_path
