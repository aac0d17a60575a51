import asyncio
import json
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from sqlalchemy import event
from sqlalchemy.orm import Session

from pixcheckout.utils.logger import logger


class ConnectionManager:
    """Gerenciador de conexões WebSocket para notificações em tempo real"""

    def __init__(self):
        # Armazena conexões por user_id
        self.active_connections: Dict[str, Set[WebSocket]] = {}
        # Mapeia WebSocket para user_id
        self.websocket_to_user: Dict[WebSocket, str] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        # referências fortes; o loop só guarda weakrefs das tasks
        self._tasks: Set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket, user_id: str):
        """Aceita uma nova conexão WebSocket"""
        await websocket.accept()
        self._loop = asyncio.get_running_loop()

        user_id = str(user_id)
        self.active_connections.setdefault(user_id, set()).add(websocket)
        self.websocket_to_user[websocket] = user_id

        logger.info(f"[Realtime] WebSocket conectado: usuário {user_id}")

    def disconnect(self, websocket: WebSocket):
        """Remove uma conexão WebSocket"""
        user_id = self.websocket_to_user.pop(websocket, None)
        if user_id and user_id in self.active_connections:
            self.active_connections[user_id].discard(websocket)
            if not self.active_connections[user_id]:
                del self.active_connections[user_id]

        logger.info(f"[Realtime] WebSocket desconectado: usuário {user_id}")

    async def _send(self, websocket: WebSocket, texto: str) -> bool:
        try:
            await websocket.send_text(texto)
            return True
        except Exception as e:
            logger.error(f"[Realtime] Erro ao enviar mensagem: {e}")
            # Remove conexão inválida
            self.disconnect(websocket)
            return False

    async def send_to_user(self, user_id: str, message: Dict[str, Any]) -> bool:
        """Envia mensagem para um usuário específico"""
        connections = self.active_connections.get(str(user_id), set()).copy()
        if not connections:
            return False

        texto = json.dumps(jsonable_encoder(message))
        enviados = [await self._send(ws, texto) for ws in connections]
        return any(enviados)

    async def broadcast(self, message: Dict[str, Any]) -> int:
        """Envia mensagem para todos os usuários conectados"""
        all_connections = set(self.websocket_to_user.keys())
        if not all_connections:
            return 0

        texto = json.dumps(jsonable_encoder(message))
        success_count = 0
        for websocket in all_connections:
            if await self._send(websocket, texto):
                success_count += 1
        return success_count

    def publicar(self, message: Dict[str, Any], user_id: Optional[int] = None):
        """
        Agenda o envio a partir de código síncrono (services rodando no threadpool).
        Sem conexões ativas não faz nada.
        """
        if not self.websocket_to_user or self._loop is None or self._loop.is_closed():
            return

        coro = self.send_to_user(str(user_id), message) if user_id is not None else self.broadcast(message)
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            task = self._loop.create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._envio_concluido)
        else:
            asyncio.run_coroutine_threadsafe(coro, self._loop).add_done_callback(self._envio_concluido)

    def _envio_concluido(self, futuro):
        self._tasks.discard(futuro)
        if futuro.cancelled():
            return
        erro = futuro.exception()
        if erro is not None:
            logger.error(f"[Realtime] Falha no envio agendado: {erro}")

    def get_connection_count(self) -> int:
        return len(self.websocket_to_user)


# Instância global do gerenciador
websocket_manager = ConnectionManager()

PENDENTES = "realtime_pendentes"


def publicar_apos_commit(db: Session, message: Dict[str, Any], user_id: Optional[int] = None):
    """Enfileira a mensagem na sessão; só é publicada depois do commit."""
    db.info.setdefault(PENDENTES, []).append((message, user_id))


@event.listens_for(Session, "after_commit")
def _publicar_pendentes(session: Session):
    for message, user_id in session.info.pop(PENDENTES, []):
        websocket_manager.publicar(message, user_id=user_id)


@event.listens_for(Session, "after_rollback")
def _descartar_pendentes(session: Session):
    session.info.pop(PENDENTES, None)
