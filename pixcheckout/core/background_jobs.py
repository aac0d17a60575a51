"""
Jobs periódicos executados dentro do processo da API:
expiração de pedidos pendentes e execução dos relatórios agendados.
"""
import asyncio
from typing import List, Optional

from pixcheckout.config.settings import (
    ENABLE_BACKGROUND_JOBS,
    EXPIRE_ORDERS_INTERVAL_SECONDS,
    REPORTS_INTERVAL_SECONDS,
)
from pixcheckout.database.db_connection import abrir_sessao
from pixcheckout.utils.logger import logger


def expirar_pedidos_pendentes() -> int:
    from pixcheckout.api.pedidos.services.service_pedido import PedidosService

    db = abrir_sessao()
    try:
        total = PedidosService(db).expirar_pedidos()
        db.commit()
        return total
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


async def executar_relatorios_pendentes() -> int:
    from pixcheckout.api.relatorios.services.service_relatorio import RelatoriosService

    db = abrir_sessao()
    try:
        total = await RelatoriosService(db).executar_pendentes()
        db.commit()
        return total
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


class BackgroundWorker:
    """Mantém os loops periódicos; start/stop chamados no ciclo de vida da API."""

    def __init__(self):
        self._tasks: List[asyncio.Task] = []
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        if self._running:
            return
        self._running = True
        self._tasks = [
            asyncio.create_task(self._loop("expirar_pedidos", EXPIRE_ORDERS_INTERVAL_SECONDS, self._expirar)),
            asyncio.create_task(self._loop("relatorios", REPORTS_INTERVAL_SECONDS, executar_relatorios_pendentes)),
        ]
        logger.info("[Jobs] Background worker iniciado")

    async def stop(self):
        self._running = False
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("[Jobs] Background worker parado")

    @staticmethod
    async def _expirar() -> int:
        return await asyncio.to_thread(expirar_pedidos_pendentes)

    async def _loop(self, nome: str, intervalo: int, job):
        while self._running:
            try:
                await job()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"[Jobs] Erro no job {nome}: {e}")
            await asyncio.sleep(intervalo)


_worker: Optional[BackgroundWorker] = None


async def iniciar_jobs() -> Optional[BackgroundWorker]:
    global _worker
    if not ENABLE_BACKGROUND_JOBS:
        logger.info("[Jobs] Jobs em background desabilitados (ENABLE_BACKGROUND_JOBS=false)")
        return None
    _worker = BackgroundWorker()
    await _worker.start()
    return _worker


async def encerrar_jobs():
    global _worker
    if _worker is not None:
        await _worker.stop()
        _worker = None
