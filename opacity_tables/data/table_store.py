"""
HDF5 storage for baked gases.

Baking is the expensive step, so a gas can be saved once and reloaded
without recomputing line shapes. Layout::

    attrs: kind, name, formula, mu, C (well-mixed only), version
    domain (attrs: Tmin, Tmax, nT, Pmin, Pmax, nP; datasets T, P)
    wavenumbers                      (n_wavenumber,)
    tables/coef                      (n_wavenumber, nT, nP)
    tables/empty                     (n_wavenumber,)
    tables/x_bounds, tables/y_bounds (n_wavenumber, 2)

A variable-concentration gas stores no concentration; the function must be
supplied again when loading.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

import h5py
import numpy as np

from opacity_tables.core.bake import check_concentration
from opacity_tables.core.domain import AtmosphericDomain
from opacity_tables.core.gases import Gas, VariableGas, WellMixedGas
from opacity_tables.core.interpolation import BichebyshevInterpolator
from opacity_tables.core.table import OpacityTable

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def save_gas(gas: Gas, output_path, compression: Optional[str] = "gzip") -> None:
    """Write a baked gas to HDF5.

    Args:
        gas: WellMixedGas or VariableGas
        output_path: Path to output HDF5 file (overwritten)
        compression: HDF5 compression type ('gzip', 'lzf', or None)
    """
    if len(gas.tables) != len(gas.wavenumbers):
        raise ValueError(
            f"gas has {len(gas.tables)} tables for {len(gas.wavenumbers)} wavenumbers"
        )

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    compression_opts = {"compression": compression} if compression else {}

    coef = np.stack([table.interpolator.coef for table in gas.tables])
    empty = np.array([table.empty for table in gas.tables], dtype=bool)
    x_bounds = np.array([(t.interpolator.xa, t.interpolator.xb) for t in gas.tables])
    y_bounds = np.array([(t.interpolator.ya, t.interpolator.yb) for t in gas.tables])

    logger.info(f"Saving {gas.name} ({len(gas.tables)} tables) to {output_path}")
    with h5py.File(output_path, "w") as f:
        f.attrs["version"] = FORMAT_VERSION
        f.attrs["kind"] = type(gas).__name__
        f.attrs["name"] = gas.name
        f.attrs["formula"] = gas.formula
        f.attrs["mu"] = gas.mu
        if isinstance(gas, WellMixedGas):
            f.attrs["C"] = gas.C

        domain = gas.domain
        dom_group = f.create_group("domain")
        dom_group.create_dataset("T", data=np.asarray(domain.T))
        dom_group.create_dataset("P", data=np.asarray(domain.P))
        for key in ("Tmin", "Tmax", "nT", "Pmin", "Pmax", "nP"):
            dom_group.attrs[key] = getattr(domain, key)

        f.create_dataset("wavenumbers", data=np.asarray(gas.wavenumbers))

        tables_group = f.create_group("tables")
        tables_group.create_dataset("coef", data=coef, **compression_opts)
        tables_group.create_dataset("empty", data=empty)
        tables_group.create_dataset("x_bounds", data=x_bounds)
        tables_group.create_dataset("y_bounds", data=y_bounds)


def _read_domain(group) -> AtmosphericDomain:
    T = group["T"][:]
    P = group["P"][:]
    T.setflags(write=False)
    P.setflags(write=False)
    attrs = group.attrs
    return AtmosphericDomain(
        T, float(attrs["Tmin"]), float(attrs["Tmax"]), int(attrs["nT"]),
        P, float(attrs["Pmin"]), float(attrs["Pmax"]), int(attrs["nP"]),
    )


def load_gas(
    path,
    concentration: Optional[Union[float, Callable[[float, float], float]]] = None,
) -> Gas:
    """Load a gas written by `save_gas`.

    Args:
        path: Path to the HDF5 file
        concentration: For a well-mixed gas, an optional replacement
            concentration (same caveats as `WellMixedGas.reconcentrate`).
            For a variable gas, the C(T, P) function, which is required.

    Returns:
        WellMixedGas or VariableGas

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: On an unknown gas kind or a missing concentration
            function for a variable gas
        TypeError: If a function is given for a well-mixed gas
        ConcentrationError: If a replacement concentration is outside [0, 1]
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Gas file not found: {path}")

    with h5py.File(path, "r") as f:
        kind = str(f.attrs["kind"])
        name = str(f.attrs["name"])
        formula = str(f.attrs["formula"])
        mu = float(f.attrs["mu"])
        stored_C = float(f.attrs["C"]) if "C" in f.attrs else None

        domain = _read_domain(f["domain"])
        wavenumbers = f["wavenumbers"][:]

        tables_group = f["tables"]
        coef = tables_group["coef"][:]
        empty = tables_group["empty"][:]
        x_bounds = tables_group["x_bounds"][:]
        y_bounds = tables_group["y_bounds"][:]

    tables = [
        OpacityTable(
            BichebyshevInterpolator.from_coefficients(coef[k], x_bounds[k], y_bounds[k]),
            bool(empty[k]),
        )
        for k in range(len(wavenumbers))
    ]
    logger.info(f"Loaded {name} ({len(tables)} tables) from {path}")

    if kind == "WellMixedGas":
        if callable(concentration):
            raise TypeError(f"{path} holds a well-mixed gas; give a scalar concentration")
        C = stored_C if concentration is None else check_concentration(float(concentration))
        return WellMixedGas(name, formula, mu, C, wavenumbers, domain, tables)

    if kind == "VariableGas":
        if not callable(concentration):
            raise ValueError(
                f"{path} holds a variable-concentration gas; a function C(T, P) is required"
            )
        return VariableGas(name, formula, mu, concentration, wavenumbers, domain, tables)

    raise ValueError(f"Unknown gas kind '{kind}' in {path}")
