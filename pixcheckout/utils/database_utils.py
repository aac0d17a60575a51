from datetime import datetime
from zoneinfo import ZoneInfo

TZ_SP = ZoneInfo('America/Sao_Paulo')


def now_trimmed():
    """Retorna datetime atual em timezone de São Paulo, sem microsegundos"""
    return datetime.now(TZ_SP).replace(microsecond=0)


def as_aware(value: datetime | None) -> datetime | None:
    """Datas lidas sem timezone (ex.: SQLite) são tratadas como horário de São Paulo."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=TZ_SP)
    return value


def to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
