from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.schemas.schema_produto import ProdutoOut, TipoProduto
from pixcheckout.api.cadastros.services.service_produto import ProdutosService
from pixcheckout.database.db_connection import get_db

router = APIRouter(prefix="/api/cadastros/public/produtos", tags=["Public - Cadastros - Produtos"])


@router.get("", response_model=List[ProdutoOut])
def listar_produtos_ativos(
    tipo: Optional[TipoProduto] = Query(None),
    busca: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return ProdutosService(db).list(ativo=True, tipo=tipo, busca=busca)


@router.get("/{produto_id}", response_model=ProdutoOut)
def get_produto_ativo(produto_id: int, db: Session = Depends(get_db)):
    return ProdutosService(db).get_publico(produto_id)
