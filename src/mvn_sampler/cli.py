"""
Command-line interface for the mvn_sampler package.
"""

import argparse
import math
import sys
from pathlib import Path

import numpy as np
import torch

from .config import SamplerConfig, load_config
from .distributions import MvNormalSampler
from .errors import SamplerError
from .utils.stats import standard_error, summarize


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mvn-sampler",
        description="Draw samples from a multivariate normal distribution"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON config file; other flags override its values"
    )

    parser.add_argument(
        "--mean",
        type=float,
        nargs="+",
        default=None,
        help="Mean vector, e.g. --mean 0 0"
    )

    parser.add_argument(
        "--covariance",
        type=float,
        nargs="+",
        default=None,
        help="Covariance matrix entries in row-major order, e.g. --covariance 2 1 1 2"
    )

    parser.add_argument(
        "-n", "--num-samples",
        type=int,
        default=None,
        help="Number of samples to draw"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random generator"
    )

    parser.add_argument(
        "--tol",
        type=float,
        default=None,
        help="Pivot tolerance for the Cholesky factorisation"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Reject singular covariance matrices"
    )

    parser.add_argument(
        "--dtype",
        choices=["float32", "float64"],
        default=None,
        help="Floating point precision"
    )

    parser.add_argument(
        "--device",
        type=str,
        default=None,
        help="Device to sample on (cpu or cuda)"
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write samples to a .npy or .csv file"
    )

    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Save a scatter plot of 2D samples to this path"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Print the factor and sample statistics"
    )

    return parser


def _covariance_from_flat(values):
    size = int(round(math.sqrt(len(values))))
    if size * size != len(values):
        raise SamplerError(f"--covariance needs a square number of entries, got {len(values)}")
    return [list(values[i * size:(i + 1) * size]) for i in range(size)]


def resolve_config(args: argparse.Namespace) -> SamplerConfig:
    """Merge a config file (if any) with CLI flags; flags win."""
    config = load_config(args.config) if args.config else SamplerConfig()
    overrides = config.to_dict()

    if args.mean is not None:
        overrides["mean"] = args.mean
    if args.covariance is not None:
        overrides["covariance"] = _covariance_from_flat(args.covariance)
    elif args.mean is not None and not args.config and len(args.mean) != len(config.covariance):
        # identity covariance matching the requested mean
        overrides["covariance"] = np.eye(len(args.mean)).tolist()

    for key, value in (
        ("num_samples", args.num_samples),
        ("seed", args.seed),
        ("tol", args.tol),
        ("require_positive_definite", args.strict),
        ("dtype", args.dtype),
        ("device", args.device),
        ("output", args.output),
        ("plot", args.plot),
        ("verbose", args.verbose),
    ):
        if value is not None:
            overrides[key] = value

    return SamplerConfig.from_dict(overrides)


def save_samples(samples, path: str) -> None:
    array = samples.detach().cpu().numpy()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".csv":
        np.savetxt(path, array, delimiter=",")
    elif path.suffix == ".npy":
        np.save(path, array)
    else:
        raise ValueError(f"Unsupported output format {path.suffix!r}; use .npy or .csv")


def check_device(device: str) -> None:
    """Raise ValueError for a device string torch cannot parse or cannot use here."""
    try:
        parsed = torch.device(device)
    except RuntimeError as exc:
        raise ValueError(f"invalid device {device!r}: {exc}") from exc
    if parsed.type == "cuda" and not torch.cuda.is_available():
        raise ValueError(f"device {device!r} requested but CUDA is not available")


def run(config: SamplerConfig):
    """Build the sampler described by `config`, draw, and write outputs. Returns the samples."""
    check_device(config.device)
    sampler = MvNormalSampler.from_config(config)
    if config.verbose:
        print(f"Sampler: {sampler}")
        print(f"Cholesky factor:\n{sampler.cholesky_factor}")
        print(f"Drawing {config.num_samples} samples...")

    samples = sampler.draw_batch(config.num_samples)

    summary = summarize(samples)
    if summary["mean"] is not None:
        print(f"Empirical mean: {summary['mean'].tolist()}")
        se = standard_error(sampler.covariance_matrix, summary["n"])
        print(f"Standard error: {se.tolist()}")
    if summary["covariance"] is not None:
        print(f"Empirical covariance: {summary['covariance'].tolist()}")

    if config.output:
        save_samples(samples, config.output)
        if config.verbose:
            print(f"Saved samples to {config.output}")

    if config.plot:
        if sampler.dim != 2:
            raise ValueError(f"--plot needs a 2D distribution, got dim={sampler.dim}")
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        from .plotting import plot_samples_2D

        ax = plot_samples_2D(samples, sampler=sampler, save_path=config.plot)
        plt.close(ax.figure)
        if config.verbose:
            print(f"Saved plot to {config.plot}")

    return samples


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
        run(config)
    except (SamplerError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
