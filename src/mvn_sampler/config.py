"""
Configuration for sampling runs.

A SamplerConfig holds the target distribution (mean and covariance), how many
samples to draw, the seed, the factorisation tolerance and where to write
results. Configs can be built in code or loaded from a JSON file; CLI flags take
final precedence over file values.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


_DTYPES = ("float32", "float64")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class SamplerConfig:
    """Configuration for a single sampling run."""

    # Target distribution
    mean: List[float] = field(default_factory=lambda: [0.0, 0.0])
    covariance: List[List[float]] = field(default_factory=lambda: [[1.0, 0.0], [0.0, 1.0]])

    # Sampling
    num_samples: int = 1000
    seed: Optional[int] = None

    # Factorisation policy
    tol: Optional[float] = None
    require_positive_definite: bool = False

    # Numerics
    dtype: str = "float64"
    device: str = "cpu"

    # Outputs
    output: Optional[str] = None
    plot: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.mean, (list, tuple)) or not all(_is_real(m) for m in self.mean):
            raise ValueError(f"mean must be a list of numbers, got {self.mean!r}")
        if not isinstance(self.covariance, (list, tuple)) or not all(
            isinstance(row, (list, tuple)) and all(_is_real(c) for c in row) for row in self.covariance
        ):
            raise ValueError(f"covariance must be a list of lists of numbers, got {self.covariance!r}")
        self.mean = [float(m) for m in self.mean]
        self.covariance = [[float(c) for c in row] for row in self.covariance]

        if not _is_int(self.num_samples) or self.num_samples < 0:
            raise ValueError(f"num_samples must be an integer >= 0, got {self.num_samples!r}")
        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            raise ValueError(f"seed must be an integer >= 0, got {self.seed!r}")
        if self.tol is not None and (not _is_real(self.tol) or self.tol < 0):
            raise ValueError(f"tol must be a number >= 0, got {self.tol!r}")
        for flag in ("require_positive_definite", "verbose"):
            if not isinstance(getattr(self, flag), bool):
                raise ValueError(f"{flag} must be true or false, got {getattr(self, flag)!r}")
        if self.dtype not in _DTYPES:
            raise ValueError(f"dtype must be one of {_DTYPES}, got {self.dtype!r}")
        if not isinstance(self.device, str):
            raise ValueError(f"device must be a string, got {self.device!r}")
        for path in ("output", "plot"):
            if getattr(self, path) is not None and not isinstance(getattr(self, path), str):
                raise ValueError(f"{path} must be a path string, got {getattr(self, path)!r}")

    @property
    def dim(self) -> int:
        return len(self.mean)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "SamplerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def save(self, path: Union[str, Path]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(path: Union[str, Path]) -> SamplerConfig:
    """Load a SamplerConfig from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        values = json.load(f)
    if not isinstance(values, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return SamplerConfig.from_dict(values)


def get_correlated_2d_config() -> SamplerConfig:
    """Two correlated coordinates, the running example of the tutorial."""
    return SamplerConfig(
        mean=[0.0, 0.0],
        covariance=[[2.0, 1.0], [1.0, 2.0]],
        num_samples=1000,
        seed=0,
    )
