from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DonationPointPayload(BaseModel):
    """Request body accepted when creating or updating a donation point."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    nome: str = Field(min_length=1)
    endereco: str = Field(min_length=1)
    cidade: str = Field(min_length=1)
    tipo_doacoes: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tipoDoacoes", "tipodoacoes", "tipo_doacoes"),
    )
    itens_urgentes: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("itensUrgentes", "itensurgentes", "itens_urgentes"),
    )
    horario: Optional[str] = None
    contato: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @field_validator("tipo_doacoes", "itens_urgentes", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("tipo_doacoes", "itens_urgentes")
    @classmethod
    def _drop_blank_entries(cls, value: List[str]) -> List[str]:
        return [entry.strip() for entry in value if entry and entry.strip()]
