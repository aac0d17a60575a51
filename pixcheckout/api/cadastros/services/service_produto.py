from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.cadastros.repositories.repo_produto import ProdutoRepository
from pixcheckout.api.cadastros.schemas.schema_produto import ProdutoCreate, ProdutoUpdate
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.utils.logger import logger


class ProdutosService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProdutoRepository(db)

    def create(self, data: ProdutoCreate) -> ProdutoModel:
        produto = self.repo.create(ProdutoModel(**data.model_dump()))
        logger.info(f"[Produtos] Produto criado id={produto.id} nome={produto.name}")
        return produto

    def update(self, produto_id: int, data: ProdutoUpdate) -> ProdutoModel:
        produto = self.get(produto_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(produto, key, value)
        return self.repo.update(produto)

    def get(self, produto_id: int) -> ProdutoModel:
        produto = self.repo.get(produto_id)
        if not produto:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Produto não encontrado")
        return produto

    def get_publico(self, produto_id: int) -> ProdutoModel:
        produto = self.repo.get_ativo(produto_id)
        if not produto:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Produto não encontrado")
        return produto

    def list(self, ativo: Optional[bool] = None, tipo: Optional[str] = None, busca: Optional[str] = None):
        return self.repo.list(ativo=ativo, tipo=tipo, busca=busca)

    def atualizar_imagem(self, produto_id: int, image_url: str) -> ProdutoModel:
        produto = self.get(produto_id)
        produto.image_url = image_url
        return self.repo.update(produto)

    def delete(self, produto_id: int) -> bool:
        """
        Remove o produto. Produtos com pedidos são apenas desativados.
        Retorna True quando houve remoção física.
        """
        produto = self.get(produto_id)
        possui_pedidos = (
            self.db.query(PedidoModel.id).filter(PedidoModel.product_id == produto_id).first() is not None
        )
        if possui_pedidos:
            produto.active = False
            self.repo.update(produto)
            logger.info(f"[Produtos] Produto {produto_id} possui pedidos; desativado em vez de removido")
            return False
        self.repo.delete(produto)
        logger.info(f"[Produtos] Produto removido id={produto_id}")
        return True
