import sqlite3
from pathlib import Path

import pytest

from points import DonationPointPayload, DonationPointService


def _payload(**overrides):
    payload = {
        "nome": "Igreja Central",
        "endereco": "Rua das Flores, 100",
        "cidade": "São Paulo",
        "tipoDoacoes": ["Alimento", "Roupas"],
        "itensUrgentes": ["Arroz", "Feijão"],
        "horario": "08h-18h",
        "contato": "(11) 99999-0000",
        "latitude": -23.55,
        "longitude": -46.63,
    }
    payload.update(overrides)
    return payload


def test_create_and_fetch_round_trip(tmp_path: Path) -> None:
    service = DonationPointService(db_path=tmp_path / "nested" / "pontos.db")

    created = service.create(_payload())

    assert created.id == 1
    assert created.tipo_doacoes == ["Alimento", "Roupas"]
    assert created.itens_urgentes == ["Arroz", "Feijão"]

    fetched = service.get(created.id)
    assert fetched == created
    assert fetched.as_dict() == {
        "id": 1,
        "nome": "Igreja Central",
        "endereco": "Rua das Flores, 100",
        "cidade": "São Paulo",
        "tipodoacoes": ["Alimento", "Roupas"],
        "itensurgentes": ["Arroz", "Feijão"],
        "horario": "08h-18h",
        "contato": "(11) 99999-0000",
        "latitude": -23.55,
        "longitude": -46.63,
    }
    assert service.get(999) is None


def test_list_all_is_ordered_by_id(tmp_path: Path) -> None:
    service = DonationPointService(db_path=tmp_path / "pontos.db")
    service.create(_payload(nome="Primeiro"))
    service.create(_payload(nome="Segundo", cidade="Campinas"))

    names = [point.nome for point in service.list_all()]

    assert names == ["Primeiro", "Segundo"]


def test_list_by_city_ignores_case(tmp_path: Path) -> None:
    service = DonationPointService(db_path=tmp_path / "pontos.db")
    service.create(_payload(cidade="Campinas"))
    service.create(_payload(cidade="campinas"))
    service.create(_payload(cidade="Santos"))

    matches = service.list_by_city("CAMPINAS")

    assert [point.cidade for point in matches] == ["Campinas", "campinas"]
    assert service.list_by_city("Recife") == []


def test_update_replaces_fields(tmp_path: Path) -> None:
    service = DonationPointService(db_path=tmp_path / "pontos.db")
    created = service.create(_payload())

    updated = service.update(
        created.id,
        DonationPointPayload(
            nome="Igreja Central",
            endereco="Rua Nova, 5",
            cidade="São Paulo",
            tipo_doacoes=["Higiene"],
        ),
    )

    assert updated is not None
    assert updated.endereco == "Rua Nova, 5"
    assert updated.tipo_doacoes == ["Higiene"]
    assert updated.itens_urgentes == []
    assert updated.horario is None
    assert service.update(999, _payload()) is None


def test_delete_is_idempotent(tmp_path: Path) -> None:
    service = DonationPointService(db_path=tmp_path / "pontos.db")
    created = service.create(_payload())

    assert service.delete(created.id) is True
    assert service.delete(created.id) is False
    assert service.list_all() == []


def test_invalid_payloads_raise_value_error(tmp_path: Path) -> None:
    service = DonationPointService(db_path=tmp_path / "pontos.db")

    with pytest.raises(ValueError, match="cidade"):
        service.create(_payload(cidade="   "))

    with pytest.raises(ValueError, match="latitude"):
        service.create(_payload(latitude=123))

    with pytest.raises(ValueError):
        service.create(["not", "a", "mapping"])

    assert service.list_all() == []


def test_payload_normalises_item_lists() -> None:
    payload = DonationPointPayload.model_validate(
        _payload(tipoDoacoes=None, itensUrgentes=[" Arroz ", "", "  "])
    )

    assert payload.tipo_doacoes == []
    assert payload.itens_urgentes == ["Arroz"]


def test_malformed_list_columns_decode_as_empty(tmp_path: Path) -> None:
    db_path = tmp_path / "pontos.db"
    service = DonationPointService(db_path=db_path)
    created = service.create(_payload())

    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "UPDATE pontos_de_doacao SET tipodoacoes = ?, itensurgentes = ? WHERE id = ?",
            ("not json", '{"Arroz": 1}', created.id),
        )
        conn.commit()

    point = service.get(created.id)

    assert point.tipo_doacoes == []
    assert point.itens_urgentes == []


def test_payload_accepts_storage_column_names() -> None:
    data = _payload()
    del data["tipoDoacoes"], data["itensUrgentes"]
    data.update(tipodoacoes=["Higiene"], itensurgentes=["Fralda"])

    payload = DonationPointPayload.model_validate(data)

    assert payload.tipo_doacoes == ["Higiene"]
    assert payload.itens_urgentes == ["Fralda"]
