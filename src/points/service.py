"""SQLite-backed storage for donation points.

:class:`DonationPointService` owns the ``pontos_de_doacao`` table and exposes
the handful of parameterised queries the API needs: list everything, look up a
point by id or by city, and create, update or delete a point. Donation types
and urgent items are stored as JSON arrays in text columns.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from aggregation import normalise_items

from .schemas import DonationPointPayload

LOGGER = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "nome",
    "endereco",
    "cidade",
    "tipodoacoes",
    "itensurgentes",
    "horario",
    "contato",
    "latitude",
    "longitude",
)


@dataclass(slots=True)
class DonationPoint:
    """Representation of a row stored in the ``pontos_de_doacao`` table."""

    id: int
    nome: str
    endereco: str
    cidade: str
    tipo_doacoes: List[str] = field(default_factory=list)
    itens_urgentes: List[str] = field(default_factory=list)
    horario: Optional[str] = None
    contato: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def as_dict(self) -> Dict[str, object]:
        """Return the JSON representation keyed by storage column names."""

        return {
            "id": self.id,
            "nome": self.nome,
            "endereco": self.endereco,
            "cidade": self.cidade,
            "tipodoacoes": list(self.tipo_doacoes),
            "itensurgentes": list(self.itens_urgentes),
            "horario": self.horario,
            "contato": self.contato,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


class DonationPointService:
    """Data-access helper for the donation point directory."""

    def __init__(self, db_path: Path | str = Path("data/pontos.db")) -> None:
        self.db_path = Path(db_path)
        if self.db_path.parent:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialise_db()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_all(self) -> List[DonationPoint]:
        """Return every stored donation point ordered by id."""

        return self._fetch_all(f"SELECT {', '.join(_COLUMNS)} FROM pontos_de_doacao ORDER BY id")

    def get(self, point_id: int) -> Optional[DonationPoint]:
        rows = self._fetch_all(
            f"SELECT {', '.join(_COLUMNS)} FROM pontos_de_doacao WHERE id = ?",
            (point_id,),
        )
        return rows[0] if rows else None

    def list_by_city(self, city: str) -> List[DonationPoint]:
        """Return the points located in ``city``, ignoring case."""

        return self._fetch_all(
            f"SELECT {', '.join(_COLUMNS)} FROM pontos_de_doacao "
            "WHERE LOWER(cidade) = LOWER(?) ORDER BY id",
            (city,),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, payload: DonationPointPayload | Mapping[str, Any]) -> DonationPoint:
        """Insert a new donation point and return the stored record.

        Raises
        ------
        ValueError
            If ``payload`` does not describe a valid donation point.
        """

        data = self._validate(payload)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                INSERT INTO pontos_de_doacao (
                    nome,
                    endereco,
                    cidade,
                    tipodoacoes,
                    itensurgentes,
                    horario,
                    contato,
                    latitude,
                    longitude
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._as_params(data),
            )
            conn.commit()
            point_id = cursor.lastrowid

        LOGGER.info("Created donation point %s (%s, %s)", point_id, data.nome, data.cidade)
        record = self.get(point_id)
        if record is None:  # pragma: no cover - defensive guard
            raise RuntimeError("Failed to persist donation point.")
        return record

    def update(
        self, point_id: int, payload: DonationPointPayload | Mapping[str, Any]
    ) -> Optional[DonationPoint]:
        """Replace every mutable field of ``point_id``.

        Returns ``None`` when no point with that id exists.
        """

        data = self._validate(payload)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE pontos_de_doacao SET
                    nome = ?,
                    endereco = ?,
                    cidade = ?,
                    tipodoacoes = ?,
                    itensurgentes = ?,
                    horario = ?,
                    contato = ?,
                    latitude = ?,
                    longitude = ?
                WHERE id = ?
                """,
                (*self._as_params(data), point_id),
            )
            conn.commit()
            updated = cursor.rowcount

        if not updated:
            return None
        LOGGER.info("Updated donation point %s", point_id)
        return self.get(point_id)

    def delete(self, point_id: int) -> bool:
        """Remove ``point_id``; returns whether a row was deleted."""

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM pontos_de_doacao WHERE id = ?", (point_id,))
            conn.commit()
            removed = cursor.rowcount > 0

        if removed:
            LOGGER.info("Deleted donation point %s", point_id)
        return removed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _initialise_db(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS pontos_de_doacao (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    nome TEXT NOT NULL,
                    endereco TEXT NOT NULL,
                    cidade TEXT NOT NULL,
                    tipodoacoes TEXT NOT NULL DEFAULT '[]',
                    itensurgentes TEXT NOT NULL DEFAULT '[]',
                    horario TEXT,
                    contato TEXT,
                    latitude REAL,
                    longitude REAL
                )
                """
            )
            conn.commit()

    def _fetch_all(self, query: str, params: tuple = ()) -> List[DonationPoint]:
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _validate(payload: DonationPointPayload | Mapping[str, Any]) -> DonationPointPayload:
        if isinstance(payload, DonationPointPayload):
            return payload
        try:
            return DonationPointPayload.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(_describe_validation_error(exc)) from exc

    @staticmethod
    def _as_params(data: DonationPointPayload) -> tuple:
        return (
            data.nome,
            data.endereco,
            data.cidade,
            json.dumps(data.tipo_doacoes, ensure_ascii=False),
            json.dumps(data.itens_urgentes, ensure_ascii=False),
            data.horario,
            data.contato,
            data.latitude,
            data.longitude,
        )

    def _row_to_record(self, row: sqlite3.Row) -> DonationPoint:
        return DonationPoint(
            id=row["id"],
            nome=row["nome"],
            endereco=row["endereco"],
            cidade=row["cidade"],
            tipo_doacoes=_decode_list(row["tipodoacoes"], row["id"]),
            itens_urgentes=_decode_list(row["itensurgentes"], row["id"]),
            horario=row["horario"],
            contato=row["contato"],
            latitude=row["latitude"],
            longitude=row["longitude"],
        )


def _decode_list(raw: Optional[str], point_id: int) -> List[str]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Discarding malformed list column on donation point %s: %r", point_id, raw)
        return []
    return normalise_items(parsed)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


__all__ = ["DonationPoint", "DonationPointService"]
