"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (cliente de rangos, TLS, proxy) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "pwnrange"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "pwnrange"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "pwnrange"
    return Path.home() / ".config" / "pwnrange"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Un valor `None` elimina la clave para que el setting vuelva a su default.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    for key, value in values.items():
        if value is None:
            existing.pop(key, None)
        else:
            existing[key] = value

    lines = ["# pwnrange user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="PWNRANGE_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    range_api_url: str = Field(
        default="https://api.pwnedpasswords.com/range/",
        min_length=8,
        description="Ruta base del servicio de rangos; se le concatena el prefijo de 5 caracteres.",
    )
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request (segundos). Sin valor se usa el default de httpx.",
    )
    user_agent: str = Field(
        default="pwnrange/0.1",
        min_length=1,
        description="User-Agent enviado al servicio de rangos.",
    )
    add_padding: bool = Field(
        default=True,
        description="Pedir al servicio que rellene la respuesta con registros de count 0.",
    )

    proxy: str | None = Field(
        default=None,
        description="Proxy (host:port o URL) usado para todas las consultas de rango.",
    )
    trust_env: bool = Field(
        default=False,
        description="Respetar HTTP(S)_PROXY / SSL_CERT_FILE del entorno.",
    )

    tls_verify: bool = Field(
        default=True,
        description="Verificar el certificado del servicio. Desactivarlo debe ser deliberado.",
    )
    ca_bundle: Path | None = Field(
        default=None,
        description="Bundle CA (PEM) propio en lugar del trust store por defecto.",
    )
