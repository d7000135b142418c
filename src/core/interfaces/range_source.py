"""Contrato de fuentes de rangos.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El procesador de lotes funciona igual contra el cliente HTTP o un fake en
  memoria, y se puede testear sin red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import RangeResponse


@runtime_checkable
class RangeSource(Protocol):
    """Contrato mínimo para algo que responde consultas de rango.

    Reglas de diseño:
    - `query` es síncrono: los elementos se procesan estrictamente en orden.
    - Los fallos se reportan lanzando subclases de `QueryError`, nunca
      devolviendo una respuesta vacía.
    """

    def query(self, prefix: str) -> RangeResponse:
        """Devuelve todos los registros cuyo digest empieza por `prefix`."""

        ...
