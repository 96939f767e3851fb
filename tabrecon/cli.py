"""
tabrecon - command line entry point.
Reconcile two tabular datasets from a YAML config or ad-hoc file arguments.
"""

import argparse
import sys
import traceback
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .adapters.file_reader import UniversalFileReader
from .config.manager import (
    ConfigError,
    ConfigManager,
    DatasetConfig,
    ReconciliationConfig,
    create_sample_config,
)
from .core.dataset import Dataset
from .core.key_selector import select_columns
from .core.reconciler import Reconciler, ReconciliationResult
from .reporting.exporter import ResultExporter
from .ui.summary import get_summary_renderer
from .utils.logger import configure_logger, get_logger


logger = get_logger()


DEFAULT_CONFIG = "reconcile.yaml"
SAMPLE_CONFIG_NAME = "reconcile_sample.yaml"


class ReconciliationPipeline:
    """
    Main pipeline orchestrator.

    Loads every dataset a reconciliation needs, fills in missing key and
    compare columns, reconciles, renders the summary and exports results.
    """

    def __init__(self, config_manager: ConfigManager,
                 load_config: bool = True,
                 verbose: bool = False,
                 use_rich: bool = True,
                 output_dir: Optional[Path] = None):
        """
        Initialize pipeline.

        Args:
            config_manager: Source of dataset and reconciliation configs
            load_config: Read the config file before running
            verbose: Show a mismatch preview after each summary
            use_rich: Use Rich tables for output
            output_dir: Overrides every reconciliation's output directory
        """
        self.config_manager = config_manager
        self.load_config = load_config
        self.verbose = verbose
        self.renderer = get_summary_renderer(use_rich)
        self.output_dir = Path(output_dir) if output_dir else None

        self.reader = UniversalFileReader()
        self._datasets: Dict[str, Dataset] = {}
        self.results: Dict[str, ReconciliationResult] = {}
        self.outputs: Dict[str, Dict[str, Path]] = {}

    def run(self) -> bool:
        """
        Run every configured reconciliation.

        Returns:
            True if successful, False otherwise
        """
        try:
            logger.info("pipeline.starting",
                       config=str(self.config_manager.config_path) if self.load_config else None)

            if self.load_config:
                self.config_manager.load()

            reconciliations = self.config_manager.reconciliations
            if not reconciliations:
                logger.warning("pipeline.no_reconciliations")
                return True

            for rec in reconciliations:
                self._run_reconciliation(rec)

            logger.info("pipeline.completed", reconciliations=len(self.results))
            return True

        except Exception as e:
            logger.error("pipeline.failed",
                        error=str(e),
                        traceback=traceback.format_exc())
            self.renderer.log_error(f"Pipeline failed: {e}")
            return False

    def _load_dataset(self, name: str) -> Dataset:
        """Read a configured dataset once per run."""
        if name not in self._datasets:
            config = self.config_manager.get_dataset(name)
            self._datasets[name] = self.reader.read(
                Path(config.path), file_type=config.type, empty_rows=config.empty_rows
            )
        return self._datasets[name]

    def _run_reconciliation(self, rec: ReconciliationConfig):
        dataset_a = self._load_dataset(rec.dataset_a)
        dataset_b = self._load_dataset(rec.dataset_b)

        key_columns, compare_columns = select_columns(
            dataset_a, dataset_b, rec.key_columns, rec.compare_columns
        )
        # Record the effective columns so a saved config reproduces the run
        rec.key_columns = key_columns
        rec.compare_columns = compare_columns

        result = Reconciler(rec.to_options()).reconcile(dataset_a, dataset_b)
        self.results[rec.name] = result

        self.renderer.show_summary(result, title=f"{rec.dataset_a} vs {rec.dataset_b}")
        if self.verbose:
            self.renderer.show_mismatches(result)

        output_dir = self.output_dir or Path(rec.output_dir or Path("reports") / rec.name)
        self.outputs[rec.name] = ResultExporter().export(result, output_dir)
        self.renderer.log_success(f"Results written to {output_dir}")


def build_adhoc_config(a_path: str, b_path: str,
                       key_columns: Optional[List[str]] = None,
                       compare_columns: Optional[List[str]] = None,
                       tolerance: Optional[float] = None,
                       compare_ignore_case: bool = False,
                       key_case_sensitive: bool = False) -> ConfigManager:
    """
    Build an in-memory configuration for a single A-vs-B run.

    Args:
        a_path: Dataset A file
        b_path: Dataset B file
        key_columns: Key columns (suggested when empty)
        compare_columns: Compare columns (suggested when empty)
        tolerance: Numeric tolerance (engine default when None)
        compare_ignore_case: Compare text case-insensitively
        key_case_sensitive: Match keys case-sensitively

    Returns:
        ConfigManager holding datasets "a", "b" and one reconciliation

    Raises:
        ConfigError: If the arguments are invalid
    """
    manager = ConfigManager()
    manager.datasets = {
        "a": DatasetConfig(path=a_path, name="a"),
        "b": DatasetConfig(path=b_path, name="b"),
    }
    manager.reconciliations = [
        ReconciliationConfig(
            name="adhoc",
            dataset_a="a",
            dataset_b="b",
            key_columns=list(key_columns or []),
            compare_columns=list(compare_columns or []),
            key_case_insensitive=False if key_case_sensitive else None,
            compare_case_insensitive=True if compare_ignore_case else None,
            numeric_tolerance=tolerance,
        )
    ]
    return manager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabrecon",
        description="tabrecon - reconcile two tabular datasets by key"
    )

    parser.add_argument(
        "config",
        nargs="?",
        default=DEFAULT_CONFIG,
        help=f"Configuration file (default: {DEFAULT_CONFIG})"
    )

    adhoc = parser.add_argument_group("ad-hoc reconciliation")
    adhoc.add_argument("--a", metavar="FILE", help="Dataset A file")
    adhoc.add_argument("--b", metavar="FILE", help="Dataset B file")
    adhoc.add_argument(
        "--key", action="append", default=[], metavar="COL",
        help="Key column (repeatable; suggested when omitted)"
    )
    adhoc.add_argument(
        "--compare", action="append", default=[], metavar="COL",
        help="Compare column (repeatable; shared non-key columns when omitted)"
    )
    adhoc.add_argument(
        "--tolerance", type=float, default=None, metavar="N",
        help="Numeric tolerance (default: 0)"
    )
    adhoc.add_argument(
        "--compare-ignore-case", action="store_true",
        help="Compare text values case-insensitively"
    )
    adhoc.add_argument(
        "--key-case-sensitive", action="store_true",
        help="Match keys case-sensitively"
    )

    parser.add_argument(
        "--output-dir", metavar="DIR",
        help="Write exports here (overrides configured output_dir)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable Rich tables"
    )

    parser.add_argument(
        "--log-file",
        metavar="FILE",
        help="Append JSON-lines logs to this file"
    )

    parser.add_argument(
        "--create-sample",
        action="store_true",
        help="Create sample configuration file"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"tabrecon v{__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logger(
        level="DEBUG" if args.verbose else None,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    # Create sample config if requested
    if args.create_sample:
        path = create_sample_config(Path(SAMPLE_CONFIG_NAME))
        print(f"Sample configuration created: {path}")
        return 0

    if args.a or args.b:
        if not (args.a and args.b):
            print("Error: --a and --b must be given together")
            return 1
        try:
            manager = build_adhoc_config(
                args.a, args.b,
                key_columns=args.key,
                compare_columns=args.compare,
                tolerance=args.tolerance,
                compare_ignore_case=args.compare_ignore_case,
                key_case_sensitive=args.key_case_sensitive,
            )
        except ConfigError as e:
            print(f"Error: {e}")
            return 1
        load_config = False
    else:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Configuration file not found: {config_path}")
            print("Use --create-sample to create a sample configuration, "
                  "or --a/--b for an ad-hoc run")
            return 1
        manager = ConfigManager(config_path)
        load_config = True

    pipeline = ReconciliationPipeline(
        manager,
        load_config=load_config,
        verbose=args.verbose,
        use_rich=not args.no_rich,
        output_dir=Path(args.output_dir) if args.output_dir else None,
    )

    success = pipeline.run()
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
