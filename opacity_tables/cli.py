"""
Command-line interface for opacity-tables.

Provides CLI commands for:
- Baking a gas from a configuration file
- Checking table accuracy at one wavenumber
- Building an HDF5 line database from .par files
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from opacity_tables import __version__

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def load_config(path: str):
    """Load and validate a bake configuration; None if it is invalid."""
    from opacity_tables.config import BakeConfig

    config_path = Path(path)
    if not config_path.exists():
        logger.error(f"Configuration file not found: {path}")
        return None

    config = BakeConfig.from_file(config_path)
    errors = config.validate()
    for message in errors:
        logger.error(f"Invalid configuration: {message}")
    return None if errors else config


def load_lines(gas_config):
    """Read the line list named by a GasConfig."""
    from opacity_tables.data import SpectralDatabase, read_par

    if gas_config.par_path is not None:
        return read_par(
            gas_config.par_path,
            strength_cutoff=gas_config.strength_cutoff,
            isotopologues=gas_config.isotopologues,
            name=gas_config.name,
        )

    lines = SpectralDatabase(gas_config.database_path).get_lines(
        gas_config.molecule, min_intensity=gas_config.strength_cutoff
    )
    if gas_config.isotopologues is not None:
        lines = lines.select_isotopologues(gas_config.isotopologues)
    if gas_config.name is not None:
        lines = replace(lines, name=gas_config.name)
    return lines


def run_bake(args: argparse.Namespace) -> int:
    """Bake a well-mixed gas and write it to HDF5."""
    from opacity_tables.core import WellMixedGas
    from opacity_tables.data.table_store import save_gas
    from opacity_tables.physics import get_line_shape

    config = load_config(args.config)
    if config is None:
        return 1

    output_path = args.output or config.system.output_path
    domain = config.domain.to_domain()
    wavenumbers = config.spectral.wavenumbers()
    lines = load_lines(config.gas)

    logger.info(
        f"Baking {lines.name}: {lines.num_lines} lines, {len(wavenumbers)} wavenumbers, {domain}"
    )
    gas = WellMixedGas.from_lines(
        lines,
        config.gas.concentration,
        wavenumbers,
        domain,
        shape=get_line_shape(config.spectral.line_shape),
        cutoff=config.spectral.line_cutoff,
        num_threads=config.system.num_threads,
    )
    save_gas(gas, output_path)
    n_empty = sum(table.empty for table in gas.tables)
    print(f"Baked {len(gas.tables)} tables ({n_empty} empty) to: {output_path}")
    return 0


def run_error(args: argparse.Namespace) -> int:
    """Report table error against exact line shapes at one wavenumber."""
    from opacity_tables.core import bake, opacity_error, summarize_error
    from opacity_tables.physics import get_line_shape

    config = load_config(args.config)
    if config is None:
        return 1

    domain = config.domain.to_domain()
    lines = load_lines(config.gas)
    shape = get_line_shape(config.spectral.line_shape)
    C = config.gas.concentration
    cutoff = config.spectral.line_cutoff

    table, = bake(lines, C, shape, cutoff, [args.wavenumber], domain, config.system.num_threads)
    result = opacity_error(
        table, domain, lines, args.wavenumber, C,
        shape=shape, N=args.n, cutoff=cutoff, num_threads=config.system.num_threads,
    )
    summary = summarize_error(result)

    print(f"\nOpacity table error at {args.wavenumber} cm^-1 ({args.n}x{args.n} grid):")
    print(f"  Max relative error:  {summary['max_relative']:.3e}")
    print(f"  Mean relative error: {summary['mean_relative']:.3e}")
    print(f"  Max absolute error:  {summary['max_absolute']:.3e} cm^2/molecule")
    if summary["n_undefined"]:
        print(f"  Points with zero exact cross-section: {summary['n_undefined']}")
    return 0


def run_build_db(args: argparse.Namespace) -> int:
    """Collect .par files into one HDF5 line database."""
    from opacity_tables.data import read_par, write_lines

    line_lists = {}
    for path in args.par_files:
        lines = read_par(path, args.wn_min, args.wn_max)
        if lines.formula in line_lists:
            logger.error(f"{path}: {lines.formula} already read from another file")
            return 1
        line_lists[lines.formula] = lines

    write_lines(args.output, line_lists)
    print(f"Database written to: {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with bake, error and build-db subcommands."""
    parser = argparse.ArgumentParser(
        prog="opacity-tables",
        description="opacity-tables: Pre-computed molecular absorption cross-section tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Bake a gas from a YAML configuration
    opacity-tables bake -c bake.yaml -o co2.h5

    # Check table accuracy at one wavenumber
    opacity-tables error -c bake.yaml --wavenumber 667.0 -n 50

    # Build a line database
    opacity-tables build-db -o lines.h5 CO2.par H2O.par
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"opacity-tables {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    bake_parser = subparsers.add_parser("bake", help="Bake a gas to HDF5")
    bake_parser.add_argument(
        "-c", "--config",
        type=str,
        required=True,
        help="Path to YAML or JSON configuration file",
    )
    bake_parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output HDF5 file (overrides system.output_path)",
    )
    bake_parser.set_defaults(func=run_bake)

    error_parser = subparsers.add_parser("error", help="Check table accuracy")
    error_parser.add_argument(
        "-c", "--config",
        type=str,
        required=True,
        help="Path to YAML or JSON configuration file",
    )
    error_parser.add_argument(
        "--wavenumber",
        type=float,
        required=True,
        help="Wavenumber to check [cm^-1]",
    )
    error_parser.add_argument(
        "-n",
        type=int,
        default=50,
        help="Grid points per axis (default: 50)",
    )
    error_parser.set_defaults(func=run_error)

    db_parser = subparsers.add_parser("build-db", help="Build an HDF5 line database")
    db_parser.add_argument(
        "par_files",
        nargs="+",
        help="HITRAN .par files, one molecule each",
    )
    db_parser.add_argument(
        "-o", "--output",
        type=str,
        required=True,
        help="Output HDF5 file",
    )
    db_parser.add_argument(
        "--wn-min",
        type=float,
        default=0.0,
        help="Minimum wavenumber [cm^-1]",
    )
    db_parser.add_argument(
        "--wn-max",
        type=float,
        default=float("inf"),
        help="Maximum wavenumber [cm^-1]",
    )
    db_parser.set_defaults(func=run_build_db)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.func(args)
    except Exception as e:
        logging.exception(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
