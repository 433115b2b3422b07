"""
HDF5 spectral line database.

Stores line lists for several molecules in one file so tables can be baked
offline without re-parsing `.par` files. Layout::

    molecules/<name>/wavenumber, intensity, air_width, self_width,
                     lower_energy, temp_exp, pressure_shift,
                     molecule_id, isotope_id
    metadata (attrs: total_lines, num_molecules, wavenumber_min,
              wavenumber_max, creation_date)
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import h5py
import numpy as np

from opacity_tables.data.spectral_lines import SpectralLines

logger = logging.getLogger(__name__)

_LINE_DATASETS = (
    "wavenumber", "intensity", "air_width", "self_width",
    "lower_energy", "temp_exp", "pressure_shift",
)


def write_lines(
    output_path,
    line_lists: Dict[str, SpectralLines],
    compression: Optional[str] = "gzip",
) -> None:
    """Write line lists to an HDF5 database, replacing any existing file.

    Args:
        output_path: Path to output HDF5 file
        line_lists: Mapping of molecule name to its lines
        compression: HDF5 compression type ('gzip', 'lzf', or None)

    Raises:
        ValueError: If no line lists are given
    """
    if not line_lists:
        raise ValueError("No line data to write")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    compression_opts = {"compression": compression} if compression else {}

    logger.info(f"Saving HDF5 line database to {output_path}")
    with h5py.File(output_path, "w") as f:
        molecules_group = f.create_group("molecules")

        total_lines = 0
        wn_min, wn_max = np.inf, -np.inf
        for mol_name, lines in line_lists.items():
            mol_group = molecules_group.create_group(mol_name)
            for key in _LINE_DATASETS:
                mol_group.create_dataset(key, data=getattr(lines, key), **compression_opts)
            mol_group.create_dataset("molecule_id", data=lines.molecule_id, **compression_opts)
            mol_group.create_dataset("isotope_id", data=lines.isotopologue, **compression_opts)

            mol_group.attrs["num_lines"] = lines.num_lines
            mol_group.attrs["formula"] = lines.formula
            if lines.num_lines:
                mol_group.attrs["wavenumber_min"] = float(lines.wavenumber.min())
                mol_group.attrs["wavenumber_max"] = float(lines.wavenumber.max())
                wn_min = min(wn_min, float(lines.wavenumber.min()))
                wn_max = max(wn_max, float(lines.wavenumber.max()))
            total_lines += lines.num_lines
            logger.info(f"  {mol_name}: {lines.num_lines} lines")

        meta_group = f.create_group("metadata")
        meta_group.attrs["total_lines"] = total_lines
        meta_group.attrs["num_molecules"] = len(line_lists)
        meta_group.attrs["wavenumber_min"] = wn_min
        meta_group.attrs["wavenumber_max"] = wn_max
        meta_group.attrs["creation_date"] = datetime.now(timezone.utc).isoformat()


class SpectralDatabase:
    """Read access to an HDF5 line database.

    Molecules are loaded on first request and cached.

    Example:
        >>> db = SpectralDatabase("./data/lines.h5")
        >>> lines = db.get_lines("CO2", wavenumber_range=(600, 750))
        >>> print(f"Found {lines.num_lines} CO2 lines")

    Attributes:
        db_path: Path to HDF5 database file
        molecules: Names of available molecules
        metadata: Database metadata
    """

    def __init__(self, db_path):
        """Open a line database.

        Args:
            db_path: Path to HDF5 database file

        Raises:
            FileNotFoundError: If the database file doesn't exist
        """
        self.db_path = Path(db_path)
        if not self.db_path.exists():
            raise FileNotFoundError(f"Database file not found: {db_path}")

        self._cache: Dict[str, SpectralLines] = {}
        self._metadata: Dict = {}
        self._molecules: List[str] = []
        self._load_metadata()

    def _load_metadata(self) -> None:
        with h5py.File(self.db_path, "r") as f:
            self._molecules = list(f["molecules"].keys())
            if "metadata" in f:
                meta = f["metadata"]
                self._metadata = {
                    "total_lines": int(meta.attrs.get("total_lines", 0)),
                    "num_molecules": int(meta.attrs.get("num_molecules", 0)),
                    "wavenumber_min": float(meta.attrs.get("wavenumber_min", 0)),
                    "wavenumber_max": float(meta.attrs.get("wavenumber_max", np.inf)),
                    "creation_date": str(meta.attrs.get("creation_date", "unknown")),
                }

        logger.info(
            f"Loaded spectral database with {len(self._molecules)} molecules, "
            f"{self._metadata.get('total_lines', '?')} total lines"
        )

    @property
    def molecules(self) -> List[str]:
        """Available molecules in the database."""
        return self._molecules.copy()

    @property
    def metadata(self) -> Dict:
        """Database metadata."""
        return self._metadata.copy()

    def _load_molecule(self, molecule: str) -> SpectralLines:
        if molecule in self._cache:
            return self._cache[molecule]

        with h5py.File(self.db_path, "r") as f:
            if molecule not in f["molecules"]:
                raise KeyError(f"Molecule not in database: {molecule}")
            group = f["molecules"][molecule]
            columns = {key: group[key][:] for key in _LINE_DATASETS}
            lines = SpectralLines.from_hitran(
                group["molecule_id"][:],
                group["isotope_id"][:],
                name=molecule,
                **columns,
            )

        self._cache[molecule] = lines
        logger.debug(f"Loaded {lines.num_lines} lines for {molecule}")
        return lines

    def get_lines(
        self,
        molecule: str,
        wavenumber_range: Optional[Tuple[float, float]] = None,
        min_intensity: float = 0.0,
    ) -> SpectralLines:
        """Get spectral lines for a molecule.

        Args:
            molecule: Molecule name (e.g., 'H2O', 'CO2')
            wavenumber_range: Optional inclusive (min, max) range [cm^-1]
            min_intensity: Minimum line intensity

        Returns:
            SpectralLines sorted by wavenumber

        Raises:
            KeyError: If the molecule is not in the database
        """
        lines = self._load_molecule(molecule)
        if wavenumber_range is not None:
            lines = lines.select(wavenumber_range)
        if min_intensity > 0:
            lines = lines.filter_by_intensity(min_intensity)
        return lines

    def __contains__(self, molecule: str) -> bool:
        return molecule in self._molecules

    def __repr__(self) -> str:
        return f"SpectralDatabase('{self.db_path}', molecules={self._molecules})"
