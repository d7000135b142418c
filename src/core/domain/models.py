"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los resultados se serializan directamente para la exportación JSON.

Nota:
- Ningún modelo guarda el secreto. Solo salen del calculador de digest
  digests, prefijos y posiciones.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict

PREFIX_LENGTH = 5
DIGEST_LENGTH = 40
SUFFIX_LENGTH = DIGEST_LENGTH - PREFIX_LENGTH

_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")


def is_hex(value: str) -> bool:
    return bool(_HEX_RE.match(value))


class RangeRecord(BaseModel):
    """Una línea `SUFFIX:COUNT` de la respuesta de rango."""

    model_config = ConfigDict(frozen=True)

    suffix: str = Field(
        ...,
        min_length=SUFFIX_LENGTH,
        max_length=SUFFIX_LENGTH,
        description="Los 35 caracteres hex restantes de un digest que comparte el prefijo consultado.",
    )
    count: int = Field(
        ...,
        ge=0,
        description="Veces que el digest aparece en el corpus de brechas (0 = padding).",
    )

    @field_validator("suffix")
    @classmethod
    def _suffix_is_hex(cls, value: str) -> str:
        if not is_hex(value):
            raise ValueError("suffix must be hexadecimal")
        return value


class RangeResponse(BaseModel):
    """Todos los registros que devolvió el servicio para un prefijo."""

    prefix: str = Field(
        ...,
        min_length=PREFIX_LENGTH,
        max_length=PREFIX_LENGTH,
        description="Prefijo de rango consultado (hex en mayúsculas).",
    )
    records: list[RangeRecord] = Field(
        default_factory=list,
        description="Registros en el orden de la respuesta. El orden no afecta al match.",
    )

    def __len__(self) -> int:
        return len(self.records)


class ExposureResult(BaseModel):
    """Veredicto para una credencial del lote.

    `position` es la referencia a la credencial: su índice (base 1) en la entrada.
    """

    position: int = Field(..., ge=1, description="Índice (base 1) en la secuencia de entrada.")
    exposed: bool = Field(..., description="True si el digest está en el corpus de brechas.")
    count: int | None = Field(
        default=None,
        ge=1,
        description="Apariciones en el corpus; presente solo si `exposed`.",
    )

    @model_validator(mode="after")
    def _count_iff_exposed(self) -> "ExposureResult":
        if self.exposed and self.count is None:
            raise ValueError("count is required when exposed")
        if not self.exposed and self.count is not None:
            raise ValueError("count must be empty when not exposed")
        return self


class SkippedCredential(BaseModel):
    """Credencial que no se pudo convertir a digest (local, no fatal)."""

    position: int = Field(..., ge=1)
    reason: str = Field(..., min_length=1)


BatchOutcome = ExposureResult | SkippedCredential
