"""
Reconciliation options.
Single responsibility: describe reconciliation settings and resolve defaults.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


DEFAULT_KEY_CASE_INSENSITIVE = True
DEFAULT_COMPARE_CASE_INSENSITIVE = False
DEFAULT_NUMERIC_TOLERANCE = 0


@dataclass
class ReconcileOptions:
    """
    Caller-supplied reconciliation settings.

    Unset flags (None) take their defaults in resolve_options(). Key and
    compare columns are evaluated independently and may overlap.
    """

    key_columns: List[str] = field(default_factory=list)
    compare_columns: List[str] = field(default_factory=list)
    key_case_insensitive: Optional[bool] = None
    compare_case_insensitive: Optional[bool] = None
    numeric_tolerance: Optional[float] = None


@dataclass(frozen=True)
class ResolvedOptions:
    """Fully-populated settings actually used by a reconciliation run."""

    key_columns: Tuple[str, ...]
    compare_columns: Tuple[str, ...]
    key_case_insensitive: bool
    compare_case_insensitive: bool
    numeric_tolerance: float

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the external (camelCase) option names."""
        return {
            "keyColumns": list(self.key_columns),
            "compareColumns": list(self.compare_columns),
            "keyCaseInsensitive": self.key_case_insensitive,
            "compareCaseInsensitive": self.compare_case_insensitive,
            "numericTolerance": self.numeric_tolerance,
        }


# Accepted spellings when options arrive as a plain mapping
_MAPPING_ALIASES = {
    "keyColumns": "key_columns",
    "compareColumns": "compare_columns",
    "keyCaseInsensitive": "key_case_insensitive",
    "compareCaseInsensitive": "compare_case_insensitive",
    "numericTolerance": "numeric_tolerance",
}


def _options_from_mapping(raw: Mapping[str, Any]) -> ReconcileOptions:
    """Build ReconcileOptions from snake_case or camelCase keys."""
    values = {}
    for k, v in raw.items():
        name = _MAPPING_ALIASES.get(k, k)
        if name in ReconcileOptions.__dataclass_fields__:
            values[name] = v
    return ReconcileOptions(**values)


def resolve_options(options: Union[ReconcileOptions, ResolvedOptions, Mapping[str, Any]]) -> ResolvedOptions:
    """
    Apply defaults and freeze the settings.

    Defaults: key_case_insensitive=True, compare_case_insensitive=False,
    numeric_tolerance=0. The input is never mutated.

    Args:
        options: ReconcileOptions, an already resolved value, or a mapping

    Returns:
        ResolvedOptions
    """
    if isinstance(options, ResolvedOptions):
        return options
    if not isinstance(options, ReconcileOptions):
        options = _options_from_mapping(options)

    key_ci = options.key_case_insensitive
    compare_ci = options.compare_case_insensitive
    tolerance = options.numeric_tolerance

    return ResolvedOptions(
        key_columns=tuple(options.key_columns or ()),
        compare_columns=tuple(options.compare_columns or ()),
        key_case_insensitive=DEFAULT_KEY_CASE_INSENSITIVE if key_ci is None else bool(key_ci),
        compare_case_insensitive=DEFAULT_COMPARE_CASE_INSENSITIVE if compare_ci is None else bool(compare_ci),
        numeric_tolerance=DEFAULT_NUMERIC_TOLERANCE if tolerance is None else tolerance,
    )
