"""
HITRAN isotopologue metadata.

Natural terrestrial abundances and molar masses for the isotopologues most
often used in atmospheric work, keyed by (HITRAN molecule ID, isotopologue
number). HITRAN line intensities already include the abundance; it is kept
here for the abundance-weighted mean molar mass of a line list.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Isotopologue:
    """Metadata for one isotopologue.

    Attributes:
        molecule_id: HITRAN molecule ID
        number: HITRAN isotopologue number (1 = most abundant)
        formula: Isotopic formula
        abundance: Natural terrestrial abundance
        molar_mass: Molar mass [g/mol]
    """
    molecule_id: int
    number: int
    formula: str
    abundance: float
    molar_mass: float


ISOTOPOLOGUES: Dict[Tuple[int, int], Isotopologue] = {
    (M, I): Isotopologue(M, I, formula, abundance, mass)
    for M, I, formula, abundance, mass in [
        (1, 1, "H2(16)O", 9.97317e-1, 18.010565),
        (1, 2, "H2(18)O", 1.99983e-3, 20.014811),
        (1, 3, "H2(17)O", 3.71884e-4, 19.014780),
        (1, 4, "HD(16)O", 3.10693e-4, 19.016740),
        (2, 1, "(12C)(16)O2", 9.84204e-1, 43.989830),
        (2, 2, "(13C)(16)O2", 1.10574e-2, 44.993185),
        (2, 3, "(16)O(12C)(18)O", 3.94707e-3, 45.994076),
        (2, 4, "(16)O(12C)(17)O", 7.33989e-4, 44.994045),
        (3, 1, "(16)O3", 9.92901e-1, 47.984745),
        (4, 1, "(14N)2(16)O", 9.90333e-1, 44.001062),
        (5, 1, "(12C)(16)O", 9.86544e-1, 27.994915),
        (5, 2, "(13C)(16)O", 1.10836e-2, 28.998270),
        (5, 3, "(12C)(18)O", 1.97822e-3, 29.999161),
        (6, 1, "(12C)H4", 9.88274e-1, 16.031300),
        (6, 2, "(13C)H4", 1.11031e-2, 17.034655),
        (6, 3, "(12C)H3D", 6.15751e-4, 17.037475),
        (7, 1, "(16)O2", 9.95262e-1, 31.989830),
        (7, 2, "(16)O(18)O", 3.99141e-3, 33.994076),
        (9, 1, "(32)S(16)O2", 9.45678e-1, 63.961901),
        (11, 1, "(14N)H3", 9.95872e-1, 17.026549),
        (22, 1, "(14N)2", 9.92687e-1, 28.006148),
    ]
}


def isotopologue(molecule_id: int, number: int) -> Isotopologue:
    """Look up isotopologue metadata.

    Raises:
        KeyError: If the isotopologue is not tabulated
    """
    try:
        return ISOTOPOLOGUES[(int(molecule_id), int(number))]
    except KeyError:
        raise KeyError(
            f"no isotopologue data for molecule {molecule_id}, isotopologue {number}"
        ) from None


def parse_isotopologue_code(code: str) -> int:
    """Decode the one-character HITRAN isotopologue field.

    Isotopologues beyond 9 are written as 0 (10), A (11), B (12).
    """
    code = code.strip()
    if code == "0":
        return 10
    if code.isalpha():
        return 11 + ord(code.upper()) - ord("A")
    return int(code)
