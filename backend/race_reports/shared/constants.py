"""
Canonical result columns and race constants.

This module is the single source of truth for the column set every
results file is normalized into, and for the checkpoint layout used by
the statistics.
"""

from enum import Enum


class CanonicalField(str, Enum):
    """
    Logical columns of a normalized results record.

    Values are the exact column names written to the normalized CSV, in
    the order they are declared here.
    """
    BIB = "bib"
    NOMBRE = "nombre"
    DISTANCIA = "distancia"
    GENERO = "genero"
    CATEGORIA = "categoria"
    EQUIPO = "equipo"
    TIEMPO_OFICIAL = "tiempo_oficial"
    RITMO_MEDIO = "Ritmo Medio"
    TIEMPO_CHIP = "tiempo_chip"
    RM_5KM = "RM_5km"
    SPLIT_5KM = "split_5km"
    RM_10KM = "RM_10km"
    SPLIT_10KM = "split_10km"
    RM_15KM = "RM_15km"
    SPLIT_15KM = "split_15km"
    RM_20KM = "RM_20km"
    SPLIT_20KM = "split_20km"
    RM_21KM = "RM_21km"
    SPLIT_21KM = "split_21km"
    RM_25KM = "RM_25km"
    SPLIT_25KM = "split_25km"
    RM_30KM = "RM_30km"
    SPLIT_30KM = "split_30km"
    RM_35KM = "RM_35km"
    SPLIT_35KM = "split_35km"
    RM_40KM = "RM_40km"
    SPLIT_40KM = "split_40km"
    RM_42KM = "RM_42km"
    SPLIT_42KM = "split_42km"
    LUGAR_GENERAL = "lugar_general"
    TOTAL_GENERAL = "total_general"
    LUGAR_GENERO = "lugar_genero"
    TOTAL_GENERO = "total_genero"
    LUGAR_CATEGORIA = "lugar_categoria"
    TOTAL_CATEGORIA = "total_categoria"
    RANGO = "Rango"
    NACIONALIDAD = "nacionalidad"


# Column order of the normalized CSV
CANONICAL_COLUMNS: tuple[str, ...] = tuple(f.value for f in CanonicalField)


class GenderCategory(str, Enum):
    """Normalized gender values."""
    MASCULINO = "Masculino"
    FEMENINO = "Femenino"
    X = "X"


# Checkpoint distances (km label) in increasing order
CHECKPOINTS: tuple[int, ...] = (5, 10, 15, 20, 21, 25, 30, 35, 40, 42)

# Per-checkpoint pace columns, same order as CHECKPOINTS
PACE_COLUMNS: tuple[CanonicalField, ...] = tuple(
    CanonicalField(f"RM_{km}km") for km in CHECKPOINTS
)

# Per-checkpoint cumulative split columns, same order as CHECKPOINTS
SPLIT_COLUMNS: tuple[CanonicalField, ...] = tuple(
    CanonicalField(f"split_{km}km") for km in CHECKPOINTS
)

# Columns sanitized to HH:MM:SS during normalization
TIME_COLUMNS: frozenset[CanonicalField] = frozenset(
    {
        CanonicalField.TIEMPO_OFICIAL,
        CanonicalField.TIEMPO_CHIP,
        CanonicalField.RITMO_MEDIO,
        *PACE_COLUMNS,
        *SPLIT_COLUMNS,
    }
)

# Columns sanitized to MM:SS during normalization (none at the moment)
MMSS_COLUMNS: frozenset[CanonicalField] = frozenset()

# Columns that must all be positive for a record to count as a full finisher
FULL_COMPLETION_COLUMNS: tuple[CanonicalField, ...] = (
    CanonicalField.TIEMPO_CHIP,
    *SPLIT_COLUMNS,
)

# Labels of the progressive split summary rows, same order as CHECKPOINTS
SPLIT_LABELS: tuple[str, ...] = tuple(f"split {km}K" for km in CHECKPOINTS)

MARATHON_DISTANCE_KM = 42.195

# Chart x-position of each split label
SPLIT_LABEL_TO_KM: dict[str, float] = {
    label: (MARATHON_DISTANCE_KM if km == 42 else float(km))
    for label, km in zip(SPLIT_LABELS, CHECKPOINTS)
}

ZERO_TIME = "00:00:00"
ZERO_PACE = "00:00:00"
