"""Frequency-based aggregation over donation points.

The module turns the full collection of donation points into the two read-only
views served by the API: the needs ranking (how many points currently ask for
each urgent item) and the statistics summary (totals, most common donation
types, most urgent items and the cities served).

Both views are recomputed on every call from the supplied snapshot. Counting
uses insertion-ordered dictionaries and the final ordering relies on
:func:`sorted` being stable, so items with the same count keep the order in
which they were first seen while scanning the input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

__all__ = [
    "NeedEntry",
    "StatisticsSummary",
    "compute_needs_ranking",
    "compute_statistics",
    "normalise_items",
]

# Lookup order for mappings: storage column, camelCase API field, attribute.
_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "cidade": ("cidade",),
    "tipo_doacoes": ("tipodoacoes", "tipoDoacoes", "tipo_doacoes"),
    "itens_urgentes": ("itensurgentes", "itensUrgentes", "itens_urgentes"),
}

Ranking = List[Tuple[str, int]]


@dataclass(slots=True)
class NeedEntry:
    """A single row of the needs ranking."""

    item: str
    total: int

    def as_dict(self) -> Dict[str, object]:
        return {"item": self.item, "total": self.total}


@dataclass(slots=True)
class StatisticsSummary:
    """Aggregate view over every stored donation point."""

    total_points: int = 0
    total_cities: int = 0
    common_donation_types: Ranking = field(default_factory=list)
    urgent_item_ranking: Ranking = field(default_factory=list)
    cities: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        """Return the JSON payload served by ``/api/pontos/estatisticas``."""

        return {
            "totalPontos": self.total_points,
            "totalCidades": self.total_cities,
            "tiposMaisComuns": [[key, count] for key, count in self.common_donation_types],
            "itensMaisUrgentes": [[key, count] for key, count in self.urgent_item_ranking],
            "cidades": list(self.cities),
        }


def normalise_items(value: Any) -> List[str]:
    """Coerce a list-like field into a list of strings.

    ``None``, missing values and anything that is not a list or tuple become an
    empty list. Non-string entries are dropped.
    """

    if not isinstance(value, (list, tuple)):
        return []
    return [entry for entry in value if isinstance(entry, str)]


def compute_needs_ranking(points: Iterable[Mapping[str, object] | object]) -> List[NeedEntry]:
    """Rank urgent items by the number of points requesting them.

    Parameters
    ----------
    points:
        Donation points as :class:`points.DonationPoint` instances or mappings
        (database rows, decoded JSON).

    Returns
    -------
    list[NeedEntry]
        One entry per distinct item, ordered by ``total`` descending. Ties keep
        first-occurrence order.
    """

    counts: Dict[str, int] = {}
    for point in points:
        _tally(counts, _field(point, "itens_urgentes"))
    return [NeedEntry(item=item, total=total) for item, total in _rank(counts)]


def compute_statistics(points: Iterable[Mapping[str, object] | object]) -> StatisticsSummary:
    """Build the statistics summary in a single pass over ``points``."""

    snapshot: Sequence[Mapping[str, object] | object] = list(points)
    cities: Dict[str, None] = {}
    donation_types: Dict[str, int] = {}
    urgent_items: Dict[str, int] = {}

    for point in snapshot:
        cities.setdefault(_city(point), None)
        _tally(donation_types, _field(point, "tipo_doacoes"))
        _tally(urgent_items, _field(point, "itens_urgentes"))

    return StatisticsSummary(
        total_points=len(snapshot),
        total_cities=len(cities),
        common_donation_types=_rank(donation_types),
        urgent_item_ranking=_rank(urgent_items),
        cities=list(cities),
    )


def _tally(counts: Dict[str, int], items: List[str]) -> None:
    for item in items:
        counts[item] = counts.get(item, 0) + 1


def _rank(counts: Mapping[str, int]) -> Ranking:
    return sorted(counts.items(), key=lambda pair: pair[1], reverse=True)


def _city(point: Mapping[str, object] | object) -> str:
    value = _lookup(point, "cidade")
    return value if isinstance(value, str) else str(value)


def _field(point: Mapping[str, object] | object, name: str) -> List[str]:
    return normalise_items(_lookup(point, name))


def _lookup(point: Mapping[str, object] | object, name: str) -> Any:
    if isinstance(point, Mapping):
        for key in _FIELD_ALIASES[name]:
            if key in point:
                return point[key]
        return None
    return getattr(point, name, None)
