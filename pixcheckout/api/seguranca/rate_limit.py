import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass(slots=True)
class _Janela:
    count: int
    inicio: float
    expira_em: float


class RateLimiter:
    """
    Contador de janela fixa por chave.

    A primeira chamada abre a janela (count=1). Dentro da janela, chamadas com
    count >= limit são recusadas. Passada a janela, uma nova é aberta contando
    a chamada atual. Janelas vencidas são descartadas a cada `intervalo_limpeza`
    segundos, então chaves que não voltam não ficam em memória.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, intervalo_limpeza: float = 60.0):
        self._clock = clock
        self._janelas: Dict[str, _Janela] = {}
        self._lock = threading.Lock()
        self._intervalo_limpeza = intervalo_limpeza
        self._ultima_limpeza = clock()

    def check(self, key: str, limit: int, window_seconds: float) -> bool:
        agora = self._clock()
        with self._lock:
            if agora - self._ultima_limpeza >= self._intervalo_limpeza:
                self._limpar_vencidas(agora)

            janela = self._janelas.get(key)

            if janela is None or agora > janela.expira_em:
                self._janelas[key] = _Janela(count=1, inicio=agora, expira_em=agora + window_seconds)
                return True

            if janela.count >= limit:
                return False

            janela.count += 1
            return True

    def _limpar_vencidas(self, agora: float):
        vencidas = [key for key, janela in self._janelas.items() if agora > janela.expira_em]
        for key in vencidas:
            del self._janelas[key]
        self._ultima_limpeza = agora

    def __len__(self) -> int:
        return len(self._janelas)

    def reset(self, key: str | None = None):
        with self._lock:
            if key is None:
                self._janelas.clear()
            else:
                self._janelas.pop(key, None)


# Instância compartilhada do processo (checkout)
checkout_rate_limiter = RateLimiter()
