from typing import Any, Dict, Iterable, Mapping

from pixcheckout.utils.logger import logger

_AUSENTE = object()


def obter_valor(contexto: Mapping[str, Any], caminho: str) -> Any:
    """Resolve caminhos com pontos ("order.amount"); retorna None se não existir."""
    atual: Any = contexto
    for parte in (caminho or "").split("."):
        if isinstance(atual, Mapping):
            atual = atual.get(parte, _AUSENTE)
        elif isinstance(atual, (list, tuple)) and parte.isdigit() and int(parte) < len(atual):
            atual = atual[int(parte)]
        else:
            atual = _AUSENTE
        if atual is _AUSENTE:
            return None
    return atual


def _numeros(a, b):
    return float(a), float(b)


def avaliar_condicao(condicao: Dict[str, Any], contexto: Mapping[str, Any]) -> bool:
    campo = condicao.get("campo", condicao.get("field"))
    operador = condicao.get("operador", condicao.get("operator"))
    esperado = condicao.get("valor", condicao.get("value"))
    atual = obter_valor(contexto, campo)

    try:
        if operador == "equals":
            return atual == esperado
        if operador == "not_equals":
            return atual != esperado
        if operador == "greater_than":
            a, b = _numeros(atual, esperado)
            return a > b
        if operador == "less_than":
            a, b = _numeros(atual, esperado)
            return a < b
        if operador == "contains":
            if atual is None:
                return False
            if isinstance(atual, str):
                return str(esperado) in atual
            return esperado in atual
        if operador == "in":
            return atual in (esperado or [])
    except (TypeError, ValueError):
        return False

    logger.warning(f"[Automacao] Operador desconhecido: {operador}")
    return False


def avaliar_condicoes(condicoes: Iterable[Dict[str, Any]], contexto: Mapping[str, Any]) -> bool:
    """Todas as condições precisam ser verdadeiras; lista vazia sempre passa."""
    return all(avaliar_condicao(c, contexto) for c in (condicoes or []))


def achatar(contexto: Mapping[str, Any], prefixo: str = "") -> Dict[str, Any]:
    """{"order": {"id": 1}} -> {"order.id": 1}; usado na substituição de {variáveis}."""
    plano: Dict[str, Any] = {}
    for chave, valor in contexto.items():
        nome = f"{prefixo}{chave}"
        if isinstance(valor, Mapping):
            plano.update(achatar(valor, f"{nome}."))
        else:
            plano[nome] = valor
    return plano
