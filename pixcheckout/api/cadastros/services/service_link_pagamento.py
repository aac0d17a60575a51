import uuid
from datetime import timedelta

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.models.model_link_pagamento import LinkPagamentoModel
from pixcheckout.api.cadastros.repositories.repo_link_pagamento import LinkPagamentoRepository
from pixcheckout.api.cadastros.schemas.schema_link_pagamento import LinkPagamentoCreate
from pixcheckout.api.cadastros.services.service_produto import ProdutosService
from pixcheckout.config.settings import BASE_URL
from pixcheckout.utils.database_utils import now_trimmed, as_aware
from pixcheckout.utils.logger import logger


class LinksPagamentoService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = LinkPagamentoRepository(db)

    @staticmethod
    def montar_url(link: LinkPagamentoModel) -> str:
        return f"{BASE_URL.rstrip('/')}/checkout/link/{link.url_token}"

    def criar(self, data: LinkPagamentoCreate, usuario_id: int | None = None) -> LinkPagamentoModel:
        produto = ProdutosService(self.db).get(data.product_id)
        if not produto.active:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Produto inativo")
        link = self.repo.create(
            LinkPagamentoModel(
                product_id=produto.id,
                url_token=str(uuid.uuid4()),
                status="active",
                expires_at=now_trimmed() + timedelta(minutes=data.expira_em_minutos),
                created_by=usuario_id,
            )
        )
        logger.info(f"[Links] Link de pagamento criado id={link.id} produto={produto.id}")
        return link

    def listar(self, status_filtro: str | None = None):
        return self.repo.list(status=status_filtro)

    def resolver(self, token: str) -> LinkPagamentoModel:
        """Busca o link pelo token; links vencidos são marcados como expired."""
        link = self.repo.get_by_token(token)
        if not link:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Link de pagamento não encontrado")
        if link.status == "active" and as_aware(link.expires_at) < now_trimmed():
            link.status = "expired"
            self.db.commit()
        return link

    def resolver_ativo(self, token: str) -> LinkPagamentoModel:
        link = self.resolver(token)
        if link.status == "expired":
            raise HTTPException(status.HTTP_410_GONE, "Link de pagamento expirado")
        if link.status == "used":
            raise HTTPException(status.HTTP_410_GONE, "Link de pagamento já utilizado")
        return link

    def consumir(self, link: LinkPagamentoModel):
        link.status = "used"
        self.db.flush()
