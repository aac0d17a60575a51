"""
Validações de formulário do checkout: CPF/CNPJ, telefone e e-mail.
"""
import re
from typing import Optional

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def somente_digitos(valor: Optional[str]) -> str:
    return re.sub(r"\D", "", valor or "")


def _validar_cpf(cpf: str) -> bool:
    if cpf == "0" * 11:
        return False

    soma = sum(int(cpf[i]) * (10 - i) for i in range(9))
    resto = (soma * 10) % 11
    if resto == 10:
        resto = 0
    if resto != int(cpf[9]):
        return False

    soma = sum(int(cpf[i]) * (11 - i) for i in range(10))
    resto = (soma * 10) % 11
    if resto == 10:
        resto = 0
    return resto == int(cpf[10])


def _digito_cnpj(numeros: str) -> int:
    pos = len(numeros) - 7
    soma = 0
    for digito in numeros:
        soma += int(digito) * pos
        pos -= 1
        if pos < 2:
            pos = 9
    return 0 if soma % 11 < 2 else 11 - (soma % 11)


def _validar_cnpj(cnpj: str) -> bool:
    if cnpj == "0" * 14:
        return False
    if _digito_cnpj(cnpj[:12]) != int(cnpj[12]):
        return False
    return _digito_cnpj(cnpj[:13]) == int(cnpj[13])


def validar_documento(valor: Optional[str]) -> bool:
    """
    Valida CPF (11 dígitos) ou CNPJ (14 dígitos) pelos dígitos verificadores.
    Máscaras são ignoradas; qualquer outro tamanho é inválido.
    """
    limpo = somente_digitos(valor)
    if len(limpo) == 11:
        return _validar_cpf(limpo)
    if len(limpo) == 14:
        return _validar_cnpj(limpo)
    return False


def formatar_documento(valor: Optional[str]) -> str:
    limpo = somente_digitos(valor)
    if len(limpo) == 11:
        return f"{limpo[:3]}.{limpo[3:6]}.{limpo[6:9]}-{limpo[9:]}"
    if len(limpo) == 14:
        return f"{limpo[:2]}.{limpo[2:5]}.{limpo[5:8]}/{limpo[8:12]}-{limpo[12:]}"
    return limpo


def formatar_telefone(valor: Optional[str]) -> str:
    limpo = somente_digitos(valor)
    if len(limpo) == 11:
        return f"({limpo[:2]}) {limpo[2:7]}-{limpo[7:]}"
    if len(limpo) == 10:
        return f"({limpo[:2]}) {limpo[2:6]}-{limpo[6:]}"
    return limpo


def validar_telefone(valor: Optional[str]) -> bool:
    return 10 <= len(somente_digitos(valor)) <= 11


def validar_email(valor: Optional[str]) -> bool:
    return bool(valor) and EMAIL_REGEX.match(valor) is not None
