"""
Header synonym resolution.

Timing vendors label the same column in many ways ("Chip Time",
"Tiempo Neto", "netto", ...). Two alias tables map source headers to our
columns:

- COLUMN_SYNONYMS: the canonical record columns used for normalization
  and analysis. Matching folds case, accents and punctuation; the first
  header (file order) that matches a column claims it.
- INGESTION_COLUMNS: the columns persisted by the ingestion gate. Headers
  are folded more loosely and each column takes its highest-priority
  alias present in the file.

Unmatched columns are not an error, they fall back to defaults downstream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from race_reports.shared.constants import CanonicalField
from race_reports.shared.text import normalize_ingestion_key, normalize_token

logger = logging.getLogger(__name__)

F = CanonicalField


COLUMN_SYNONYMS: Mapping[CanonicalField, tuple[str, ...]] = MappingProxyType({
    F.BIB: ("dorsal", "numero", "num", "no", "bib number", "bib_number", "startnummer", "id", "ident"),
    F.NOMBRE: ("nombre completo", "name", "full name", "vorname", "nachname"),
    F.DISTANCIA: ("distance", "dist"),
    F.GENERO: ("gender", "sexo", "sex", "rama", "gender category"),
    F.CATEGORIA: ("category", "cat", "division", "ak"),
    F.EQUIPO: ("team", "club", "equipo/club", "asociacion", "verein"),
    F.TIEMPO_OFICIAL: ("tiempo oficial", "official time", "gun time", "tiempo_general", "brutto"),
    F.RITMO_MEDIO: ("ritmo medio", "ritmo_promedio", "pace", "average pace", "pace promedio", "ritmo promedio"),
    F.TIEMPO_CHIP: ("tiempo chip", "chip time", "net time", "tiempo neto", "netto"),
    F.RM_5KM: ("rm 5km", "ritmo medio 5k", "pace 5k", "rm5k", "z5pace"),
    F.SPLIT_5KM: ("split 5km", "5km split", "split 5k", "5k split", "z5"),
    F.RM_10KM: ("rm 10km", "ritmo medio 10k", "pace 10k", "rm10k", "z10pace"),
    F.SPLIT_10KM: ("split 10km", "10km split", "split 10k", "10k split", "z10"),
    F.RM_15KM: ("rm 15km", "ritmo medio 15k", "pace 15k", "rm15k", "z15pace"),
    F.SPLIT_15KM: ("split 15km", "15km split", "split 15k", "15k split", "z15"),
    F.RM_20KM: ("rm 20km", "ritmo medio 20k", "pace 20k", "rm20k", "z20pace"),
    F.SPLIT_20KM: (
        "split 20km", "20km split", "split 20km2", "20k split",
        "split20km", "split20km2", "split_20km2", "z20",
    ),
    F.RM_21KM: ("rm 21km", "ritmo medio 21k", "pace 21k", "rm21k", "ritmo medio media maraton", "hm1pace"),
    F.SPLIT_21KM: ("split 21km", "21km split", "split 21k", "21k split", "media maraton split", "halbmarathon"),
    F.RM_25KM: ("rm 25km", "ritmo medio 25k", "pace 25k", "rm25k", "z25pace"),
    F.SPLIT_25KM: ("split 25km", "25km split", "split 25k", "25k split", "z25"),
    F.RM_30KM: ("rm 30km", "ritmo medio 30k", "pace 30k", "rm30k", "z30pace"),
    F.SPLIT_30KM: ("split 30km", "30km split", "split 30k", "30k split", "z30"),
    F.RM_35KM: ("rm 35km", "ritmo medio 35k", "pace 35k", "rm35k", "z35pace"),
    F.SPLIT_35KM: ("split 35km", "35km split", "split 35k", "35k split", "z35"),
    F.RM_40KM: ("rm 40km", "ritmo medio 40k", "pace 40k", "rm40k", "z40pace"),
    F.SPLIT_40KM: ("split 40km", "40km split", "split 40k", "40k split", "z40"),
    F.RM_42KM: ("rm 42km", "ritmo medio 42k", "pace 42k", "rm42k", "ritmo medio maraton", "z42pace"),
    F.SPLIT_42KM: ("split 42km", "42km split", "split 42k", "42k split", "split marathon", "z42"),
    F.LUGAR_GENERAL: ("overall place", "posicion general", "general place", "platz"),
    F.TOTAL_GENERAL: ("overall total", "total general", "participantes generales"),
    F.LUGAR_GENERO: ("gender place", "posicion genero", "rama lugar", "gender rank", "sex_platz"),
    F.TOTAL_GENERO: ("gender total", "total genero", "participantes genero"),
    F.LUGAR_CATEGORIA: ("category place", "posicion categoria", "cat place", "ak_platz"),
    F.TOTAL_CATEGORIA: ("category total", "total categoria", "participantes categoria"),
    F.RANGO: ("range", "rank", "ranking", "rango edad", "division rank"),
    F.NACIONALIDAD: ("nationality", "country", "pais", "nac", "nation"),
})


def _build_synonym_lookup() -> Mapping[str, CanonicalField]:
    lookup: dict[str, CanonicalField] = {}
    for canonical, synonyms in COLUMN_SYNONYMS.items():
        for variant in (canonical.value, *synonyms):
            lookup[normalize_token(variant)] = canonical
    return MappingProxyType(lookup)


# Folded alias → canonical column
SYNONYM_LOOKUP: Mapping[str, CanonicalField] = _build_synonym_lookup()


def match_header(header: str) -> CanonicalField | None:
    """Canonical column a single header resolves to, if any."""
    return SYNONYM_LOOKUP.get(normalize_token(header))


def resolve_headers(headers: Iterable[str] | None) -> dict[CanonicalField, str]:
    """
    Map canonical columns to the source headers that carry them.

    The first header (in file order) matching a column wins; later headers
    resolving to an already claimed column are ignored.

    Args:
        headers: Source header row

    Returns:
        {CanonicalField: source header} for matched columns only
    """
    matches: dict[CanonicalField, str] = {}
    if not headers:
        return matches

    for header in headers:
        canonical = match_header(header)
        if canonical is not None and canonical not in matches:
            matches[canonical] = header

    unmatched = [f.value for f in CanonicalField if f not in matches]
    logger.debug(
        f"Resolved {len(matches)} columns; unmatched: {', '.join(unmatched) or '-'}"
    )
    return matches


# =============================================================================
# Ingestion alias table
# =============================================================================

@dataclass(frozen=True)
class IngestionColumn:
    """A persisted column and the folded header keys that feed it."""

    name: str
    kind: str  # "text" | "time"
    aliases: tuple[str, ...]


def _time_column(name: str, extra: tuple[str, ...]) -> IngestionColumn:
    """Time column accepting its own name with and without underscores."""
    base = name.lower()
    variants = dict.fromkeys((base, base.replace("_", ""), *(e.lower() for e in extra)))
    return IngestionColumn(name=name, kind="time", aliases=tuple(variants))


INGESTION_BASE_COLUMNS: tuple[IngestionColumn, ...] = (
    IngestionColumn("nombre", "text", (
        "nombre", "atleta", "corredor", "competidor", "participante", "participant",
        "nombrecompleto", "fullname", "name", "nombre_completo", "athlete",
        "athlete_name", "athletename",
    )),
    IngestionColumn("genero", "text", (
        "genero", "gnero", "rama", "sexo", "gender", "sex", "rama_m", "rama_f",
        "division_sexo", "genderdivision",
    )),
    IngestionColumn("categoria", "text", (
        "categoria", "categoría", "cat", "catg", "agegroup", "age_group", "division",
        "category", "grupo_edad", "grupoedad", "agecategory", "age_cat",
    )),
    # Official/final time is accepted as a fallback for chip time
    IngestionColumn("tiempo_chip", "time", (
        "tiempochip", "tiempo_chip", "chiptime", "chip_time", "nettime", "net_time",
        "tiempofinal", "tiempo_final", "tiempooficial", "tiempo_oficial", "tiempo",
        "time", "finaltime", "final_time", "officialtime", "official_time",
        "tiempototal", "tiempo_total", "totaltime", "total_time",
        "tiempofinaltotal", "tiempo_final_total",
    )),
)

# Checkpoints without a 20 km entry: files from this path never carried one.
INGESTION_OPTIONAL_COLUMNS: tuple[IngestionColumn, ...] = (
    IngestionColumn("bib", "text", (
        "bib", "dorsal", "numero", "num", "nro", "numeroatleta", "numero_corredor", "numcorredor",
    )),
    _time_column("RM_5km", (
        "rm5km", "rm_5k", "rm5k", "ritmo5km", "ritmo5k", "pace5km", "pace5k", "ritmo_5km",
        "pace_5km", "pace_5k", "ritmo_5k", "ritmop1", "ritmo_p1", "pacerp1", "pacep1",
        "pace_p1", "ritmo01", "ritmop01", "ritmo_p01",
    )),
    _time_column("split_5km", (
        "split5km", "split_5k", "split5k", "parcial5km", "parcial_5km", "lap5km", "lap_5k",
        "lap5k", "partial5km", "partial5k", "parcial1", "parcial_1", "p1", "p_1", "p01",
        "parcial01", "primerparcial", "parcialp1",
    )),
    _time_column("RM_10km", (
        "rm10km", "rm_10k", "rm10k", "ritmo10km", "ritmo10k", "pace10km", "pace10k",
        "ritmo_10km", "pace_10km", "ritmop2", "ritmo_p2", "pacep2", "pace_p2", "ritmo02",
        "ritmop02", "ritmo_p02",
    )),
    _time_column("split_10km", (
        "split10km", "split_10k", "split10k", "parcial10km", "lap10km", "partial10km",
        "parcial2", "parcial_2", "p2", "p_2", "p02", "parcial02", "segundoparcial", "parcialp2",
    )),
    _time_column("RM_15km", (
        "rm15km", "rm_15k", "rm15k", "ritmo15km", "pace15km", "ritmop3", "ritmo_p3",
        "pacep3", "pace_p3", "ritmo03", "ritmop03", "ritmo_p03",
    )),
    _time_column("split_15km", (
        "split15km", "split_15k", "split15k", "parcial15km", "lap15km", "partial15km",
        "parcial3", "parcial_3", "p3", "p_3", "p03", "parcial03", "tercerparcial", "parcialp3",
    )),
    _time_column("RM_21km", (
        "rm21km", "rm_21k", "rm21k", "ritmo21km", "ritmo21k", "pace21km", "pace21k",
        "ritmop4", "ritmo_p4", "pacep4", "pace_p4", "ritmo04", "ritmop04", "ritmo_p04",
    )),
    _time_column("split_21km", (
        "split21km", "split_21k", "split21k", "parcial21km", "lap21km", "partial21km",
        "parcial4", "parcial_4", "p4", "p_4", "p04", "parcial04", "cuartoparcial", "parcialp4",
    )),
    _time_column("RM_25km", (
        "rm25km", "rm_25k", "rm25k", "ritmo25km", "pace25km", "ritmop5", "ritmo_p5",
        "pacep5", "pace_p5", "ritmo05", "ritmop05", "ritmo_p05",
    )),
    _time_column("split_25km", (
        "split25km", "split_25k", "split25k", "parcial25km", "lap25km", "partial25km",
        "parcial5", "parcial_5", "p5", "p_5", "p05", "parcial05", "quintoparcial", "parcialp5",
    )),
    _time_column("RM_30km", ("rm30km", "rm_30k", "rm30k", "ritmo30km", "pace30km")),
    _time_column("split_30km", ("split30km", "split_30k", "split30k", "parcial30km", "lap30km", "partial30km")),
    _time_column("RM_35km", ("rm35km", "rm_35k", "rm35k", "ritmo35km", "pace35km")),
    _time_column("split_35km", ("split35km", "split_35k", "split35k", "parcial35km", "lap35km", "partial35km")),
    _time_column("RM_40km", ("rm40km", "rm_40k", "rm40k", "ritmo40km", "pace40km")),
    _time_column("split_40km", ("split40km", "split_40k", "split40k", "parcial40km", "lap40km", "partial40km")),
    _time_column("RM_42km", ("rm42km", "rm_42k", "rm42k", "ritmo42km", "pace42km", "maratonrm", "marathonpace")),
    _time_column("split_42km", ("split42km", "split_42k", "split42k", "parcial42km", "lap42km", "partial42km")),
)


def resolve_ingestion_headers(
    headers: Iterable[str] | None,
    columns: tuple[IngestionColumn, ...] = INGESTION_BASE_COLUMNS + INGESTION_OPTIONAL_COLUMNS,
) -> dict[str, str]:
    """
    Map ingestion columns to source headers.

    Headers and aliases are folded with normalize_ingestion_key. For each
    column the first alias (table order) present among the headers wins.
    When two headers fold to the same key, the later one is used.

    Returns:
        {column name: source header} for matched columns only
    """
    folded: dict[str, str] = {}
    for header in headers or ():
        folded[normalize_ingestion_key(header)] = header

    matches: dict[str, str] = {}
    for column in columns:
        for alias in column.aliases:
            key = normalize_ingestion_key(alias)
            if key in folded:
                matches[column.name] = folded[key]
                break
    return matches
