from __future__ import annotations

from typing import Any, Mapping

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} es requerido")
    return str(value).strip()


def require_fields(data: Mapping[str, Any], *fields: str, message: str = "Faltan datos requeridos.") -> None:
    """Fail when any of ``fields`` is absent or blank in ``data``."""
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} no es válido")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es válido")
    if number <= 0:
        raise ValidationError(f"{field_name} no es válido")
    return number


def require_presence_flag(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if str(value).strip() in {"0", "1"}:
        return int(str(value).strip())
    raise ValidationError("asistencia debe ser 0 o 1")
