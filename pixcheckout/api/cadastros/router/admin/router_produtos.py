from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.schemas.schema_produto import ProdutoCreate, ProdutoOut, ProdutoUpdate, TipoProduto
from pixcheckout.api.cadastros.services.service_produto import ProdutosService
from pixcheckout.api.storage.services.service_storage import StorageService
from pixcheckout.api.storage.router.router_storage import get_storage_service
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db
from pixcheckout.utils.logger import logger

router = APIRouter(
    prefix="/api/cadastros/admin/produtos",
    tags=["Admin - Cadastros - Produtos"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[ProdutoOut])
def listar_produtos(
    ativo: Optional[bool] = Query(None),
    tipo: Optional[TipoProduto] = Query(None),
    busca: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return ProdutosService(db).list(ativo=ativo, tipo=tipo, busca=busca)


@router.get("/{produto_id}", response_model=ProdutoOut)
def get_produto(produto_id: int = Path(...), db: Session = Depends(get_db)):
    return ProdutosService(db).get(produto_id)


@router.post("", response_model=ProdutoOut, status_code=status.HTTP_201_CREATED)
def criar_produto(payload: ProdutoCreate, db: Session = Depends(get_db)):
    logger.info(f"[Produtos] Criar - {payload.name}")
    return ProdutosService(db).create(payload)


@router.put("/{produto_id}", response_model=ProdutoOut)
def atualizar_produto(produto_id: int, payload: ProdutoUpdate, db: Session = Depends(get_db)):
    logger.info(f"[Produtos] Update - id={produto_id}")
    return ProdutosService(db).update(produto_id, payload)


@router.delete("/{produto_id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_produto(produto_id: int, db: Session = Depends(get_db)):
    ProdutosService(db).delete(produto_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{produto_id}/imagem", response_model=ProdutoOut)
async def upload_imagem_produto(
    produto_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: UserModel = Depends(get_current_user),
):
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Arquivo deve ser uma imagem")
    svc = ProdutosService(db)
    svc.get(produto_id)
    arquivo = storage.upload(
        await file.read(),
        file.filename or "imagem",
        content_type=file.content_type,
        bucket="products",
        related_type="product",
        related_id=str(produto_id),
        usuario_id=current_user.id,
    )
    logger.info(f"[Produtos] Imagem do produto {produto_id} atualizada: {arquivo.url}")
    return svc.atualizar_imagem(produto_id, arquivo.url)
