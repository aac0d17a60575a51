from dataclasses import dataclass
from typing import Optional

from pixcheckout.utils.validacoes import validar_documento

DOMINIOS_EMAIL_SUSPEITOS = {"tempmail.com", "throwaway.com"}
MAX_TENTATIVAS = 3


@dataclass(slots=True)
class ResultadoFraude:
    suspeito: bool
    motivo: Optional[str] = None


def detectar_fraude(
    email: str,
    documento: str,
    tentativas: Optional[int] = None,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ResultadoFraude:
    """Heurísticas básicas; a primeira regra que casar define o motivo."""
    if tentativas and tentativas > MAX_TENTATIVAS:
        return ResultadoFraude(True, "Múltiplas tentativas de pagamento")

    dominio = email.split("@")[1].lower() if "@" in email else ""
    if dominio in DOMINIOS_EMAIL_SUSPEITOS:
        return ResultadoFraude(True, "Email temporário detectado")

    if not validar_documento(documento):
        return ResultadoFraude(True, "Documento inválido")

    return ResultadoFraude(False)
