from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.notificacoes.core.websocket_manager import publicar_apos_commit
from pixcheckout.api.notificacoes.services.service_notificacao import NotificacoesService
from pixcheckout.api.pedidos.models.model_pedido import (
    PedidoModel,
    NotaPedidoModel,
    AtualizacaoPedidoModel,
)
from pixcheckout.api.pedidos.repositories.repo_pedido import PedidoRepository
from pixcheckout.utils.database_utils import now_trimmed, as_aware
from pixcheckout.utils.logger import logger
from pixcheckout.utils.prometheus_metrics import pedidos_expirados_total

# paid, failed e cancelled são terminais
TRANSICOES = {
    "pending": {"processing", "paid", "expired", "failed", "cancelled"},
    "processing": {"paid", "expired", "failed", "cancelled"},
    "expired": {"paid"},
    "paid": set(),
    "failed": set(),
    "cancelled": set(),
}


def transicao_permitida(atual: str, novo: str) -> bool:
    return novo in TRANSICOES.get(atual, set())


class PedidosService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PedidoRepository(db)

    def get(self, pedido_id: int) -> PedidoModel:
        pedido = self.repo.get(pedido_id)
        if not pedido:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Pedido não encontrado")
        return pedido

    def listar(self, **filtros) -> list[PedidoModel]:
        return self.repo.list(**filtros)

    def atualizacoes(self, pedido_id: int):
        self.get(pedido_id)
        return self.repo.list_atualizacoes(pedido_id)

    # ---------------- STATUS ----------------
    def aplicar_status(
        self,
        pedido: PedidoModel,
        novo_status: str,
        dados: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Aplica a transição de status. Mesma situação é no-op (False);
        transição fora do ciclo de vida gera 409.
        """
        atual = pedido.status
        if atual == novo_status:
            return False
        if not transicao_permitida(atual, novo_status):
            logger.warning(f"[Pedidos] Transição inválida pedido={pedido.id}: {atual} -> {novo_status}")
            raise HTTPException(
                status.HTTP_409_CONFLICT,
                f"Transição de status inválida: {atual} -> {novo_status}",
            )

        pedido.status = novo_status
        pedido.updated_at = now_trimmed()
        atualizacao = self.repo.add_atualizacao(
            AtualizacaoPedidoModel(
                order_id=pedido.id,
                status=novo_status,
                data={"previous_status": atual, **(dados or {})},
            )
        )
        publicar_apos_commit(self.db, {
            "event": "order_update",
            "data": {
                "id": atualizacao.id,
                "order_id": pedido.id,
                "status": novo_status,
                "previous_status": atual,
            },
        })
        logger.info(f"[Pedidos] Pedido {pedido.id}: {atual} -> {novo_status}")
        return True

    def atualizar_status_manual(
        self,
        pedido_id: int,
        novo_status: str,
        usuario_id: Optional[int] = None,
        motivo: Optional[str] = None,
    ) -> PedidoModel:
        from pixcheckout.api.auditoria.services.service_auditoria import AuditoriaService

        pedido = self.get(pedido_id)
        antes = {"status": pedido.status}
        if novo_status == "paid" and pedido.paid_at is None:
            pedido.paid_at = now_trimmed()

        if self.aplicar_status(pedido, novo_status, {"source": "admin", "user_id": usuario_id}):
            AuditoriaService(self.db).registrar(
                tabela="orders",
                registro_id=str(pedido.id),
                acao="UPDATE",
                dados_antigos=antes,
                dados_novos={"status": novo_status, "motivo": motivo},
                usuario_id=usuario_id,
            )
            if motivo:
                self.adicionar_nota(pedido.id, f"Status alterado para {novo_status}: {motivo}", usuario_id)
        return pedido

    # ---------------- NOTAS ----------------
    def adicionar_nota(self, pedido_id: int, conteudo: str, autor_id: Optional[int] = None) -> NotaPedidoModel:
        self.get(pedido_id)
        return self.repo.add_nota(NotaPedidoModel(order_id=pedido_id, content=conteudo, author_id=autor_id))

    # ---------------- EXPIRAÇÃO ----------------
    def expirar_se_vencido(self, pedido: PedidoModel, agora: Optional[datetime] = None) -> bool:
        agora = agora or now_trimmed()
        if pedido.status != "pending" or not pedido.expires_at or as_aware(pedido.expires_at) >= agora:
            return False

        self.aplicar_status(pedido, "expired", {"source": "expiration"})
        NotificacoesService(self.db).criar(
            tipo="order_status",
            titulo="Pedido Expirado",
            conteudo=f"O pedido #{pedido.id} expirou sem pagamento",
            dados={"order_id": pedido.id, "amount": float(pedido.amount or Decimal("0"))},
        )
        pedidos_expirados_total.inc()
        return True

    def expirar_pedidos(self) -> int:
        """Expira pedidos pendentes com expires_at no passado; retorna a quantidade."""
        agora = now_trimmed()
        total = sum(1 for pedido in self.repo.pendentes_vencidos(agora) if self.expirar_se_vencido(pedido, agora))
        if total:
            logger.info(f"[Pedidos] {total} pedido(s) expirado(s)")
        return total
