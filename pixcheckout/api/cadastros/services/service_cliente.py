from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.models.model_cliente import ClienteModel
from pixcheckout.api.cadastros.repositories.repo_cliente import ClienteRepository
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.utils.logger import logger
from pixcheckout.utils.validacoes import somente_digitos


class ClientesService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ClienteRepository(db)

    def upsert_por_email(self, nome: str, email: str, documento: str, telefone: Optional[str]) -> ClienteModel:
        """Cria o cliente ou atualiza nome/telefone/documento quando o e-mail já existe."""
        email = email.strip().lower()
        cliente = self.repo.get_by_email(email)
        if cliente:
            cliente.name = nome
            cliente.cpf = somente_digitos(documento)
            cliente.phone = somente_digitos(telefone) or None
            self.db.flush()
            return cliente

        cliente = ClienteModel(
            name=nome,
            email=email,
            cpf=somente_digitos(documento),
            phone=somente_digitos(telefone) or None,
        )
        self.repo.add(cliente)
        logger.info(f"[Clientes] Novo cliente id={cliente.id} email={email}")
        return cliente

    def get(self, cliente_id: int) -> ClienteModel:
        cliente = self.repo.get(cliente_id)
        if not cliente:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Cliente não encontrado")
        return cliente

    def list(self, busca: Optional[str] = None, skip: int = 0, limit: int = 100):
        return self.repo.list(busca=busca, skip=skip, limit=limit)

    def detalhe(self, cliente_id: int) -> dict:
        cliente = self.get(cliente_id)
        pedidos = (
            self.db.query(PedidoModel)
            .filter(PedidoModel.customer_id == cliente_id)
            .order_by(PedidoModel.created_at.desc())
            .all()
        )
        total_gasto = (
            self.db.query(func.coalesce(func.sum(PedidoModel.amount), 0))
            .filter(PedidoModel.customer_id == cliente_id, PedidoModel.status == "paid")
            .scalar()
        )
        return {
            "cliente": cliente,
            "pedidos": pedidos,
            "total_pedidos": len(pedidos),
            "total_gasto": float(total_gasto or 0),
        }
