"""
Feature Group Registry
======================
Discovers feature groups from YAML declarations in feature_configs/.
Each YAML declares: position in the output, whether it needs the
extended flag, and its column names. Each group has a matching .py file
in groups/ with a compute(epoch) function returning {column: value}.

The declared columns are the single source of both the header and the
vector order: values are pulled out of compute()'s dict by name.

Usage:
    from accstats.registry import get_registry
    reg = get_registry()
    result = reg.get_compute('mad')(epoch)
    # → {'MAD': 0.01, 'MPD': 0.0003, 'skew': 0.4, 'kurt': -0.2}
    reg.header(extended=True, num_fft_bins=12)
"""

import importlib
import logging
import yaml
import numpy as np
from pathlib import Path
from typing import Dict, Any, Callable, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class GroupSpec:
    """Feature group specification from YAML config."""
    name: str
    version: str
    order: int
    extended: bool
    outputs: List[str]
    binned: List[str]
    category: str
    description: str

    def columns(self, num_fft_bins: int) -> List[str]:
        """Fixed outputs followed by each binned prefix expanded 0..num_fft_bins-1."""
        cols = list(self.outputs)
        for prefix in self.binned:
            cols.extend(f'{prefix}{i}' for i in range(num_fft_bins))
        return cols


class Registry:
    """
    Feature group registry. Discovers groups from YAML configs.
    Lazily imports compute functions on first use.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(__file__).parent / 'feature_configs'
        self._specs: Dict[str, GroupSpec] = {}
        self._compute_cache: Dict[str, Callable] = {}
        self._discover()

    def _discover(self):
        """Scan feature_configs/ for YAML files."""
        if not self._config_dir.exists():
            return
        specs = []
        for path in sorted(self._config_dir.glob('*.yaml')):
            with open(path) as f:
                cfg = yaml.safe_load(f)
            meta = cfg.get('metadata', {})
            specs.append(GroupSpec(
                name=path.stem,
                version=str(cfg.get('version', '1.0')),
                order=int(cfg.get('order', 0)),
                extended=bool(cfg.get('extended', True)),
                outputs=list(cfg.get('outputs', [])),
                binned=list(cfg.get('binned', [])),
                category=meta.get('category', 'unknown'),
                description=meta.get('description', ''),
            ))
        for spec in sorted(specs, key=lambda s: (s.order, s.name)):
            self._specs[spec.name] = spec
        logger.debug(f"Discovered {len(self._specs)} feature groups: {self.group_names}")

    @property
    def group_names(self) -> List[str]:
        """All discovered group names, in output order."""
        return list(self._specs.keys())

    def get_spec(self, name: str) -> GroupSpec:
        """Get group specification."""
        if name not in self._specs:
            raise KeyError(f"Unknown feature group: {name}. Available: {self.group_names}")
        return self._specs[name]

    def get_compute(self, name: str) -> Callable:
        """
        Get compute function for a group. Lazily imported.
        Returns a function: compute(Epoch) → Dict[str, float]
        """
        if name in self._compute_cache:
            return self._compute_cache[name]

        if name not in self._specs:
            raise KeyError(f"Unknown feature group: {name}")

        module = importlib.import_module(f'accstats.groups.{name}')
        func = getattr(module, 'compute')
        self._compute_cache[name] = func
        return func

    def get_outputs(self, name: str, num_fft_bins: int) -> List[str]:
        """Get column names for a group at a given bin count."""
        return self.get_spec(name).columns(num_fft_bins)

    def groups_for(self, extended: bool) -> List[str]:
        """Groups that contribute to the output, in order."""
        return [name for name, spec in self._specs.items()
                if extended or not spec.extended]

    def header_columns(self, extended: bool, num_fft_bins: int) -> List[str]:
        cols: List[str] = []
        for name in self.groups_for(extended):
            cols.extend(self.get_outputs(name, num_fft_bins))
        return cols

    def header(self, extended: bool, num_fft_bins: int) -> str:
        """Comma-joined header line."""
        return ','.join(self.header_columns(extended, num_fft_bins))

    def validate_outputs(self, name: str, result: Dict[str, Any], num_fft_bins: int) -> bool:
        """Check that a group returned every declared column."""
        expected = set(self.get_outputs(name, num_fft_bins))
        return expected.issubset(result.keys())

    def assemble(self, name: str, result: Dict[str, Any], num_fft_bins: int) -> np.ndarray:
        """
        Order a group's result by its declared columns.

        Raises:
            KeyError: the result is missing declared columns.
        """
        cols = self.get_outputs(name, num_fft_bins)
        missing = [c for c in cols if c not in result]
        if missing:
            raise KeyError(f"Feature group {name} did not return: {missing}")
        return np.array([result[c] for c in cols], dtype=np.float64)


# Module-level singleton
_registry: Optional[Registry] = None


def get_registry() -> Registry:
    """Get or create the global feature group registry."""
    global _registry
    if _registry is None:
        _registry = Registry()
    return _registry
