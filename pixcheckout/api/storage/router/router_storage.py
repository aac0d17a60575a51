from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from pixcheckout.api.storage.schemas.schema_arquivo import ArquivoMetadataUpdate, ArquivoOut, ArquivoUrlResponse
from pixcheckout.api.storage.services.service_storage import StorageService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db
from pixcheckout.utils.logger import logger

router = APIRouter(
    prefix="/api/storage/admin",
    tags=["Admin - Storage"],
    dependencies=[Depends(get_current_user)],
)


def get_storage_service(db: Session = Depends(get_db)) -> StorageService:
    return StorageService(db)


def _tags(valor: Optional[str]) -> List[str]:
    return [t.strip() for t in (valor or "").split(",") if t.strip()]


@router.post("/arquivos", response_model=ArquivoOut, status_code=status.HTTP_201_CREATED)
async def upload_arquivo(
    file: UploadFile = File(...),
    bucket: str = Form("files"),
    related_type: Optional[str] = Form(None),
    related_id: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Tags separadas por vírgula"),
    svc: StorageService = Depends(get_storage_service),
    current_user: UserModel = Depends(get_current_user),
):
    logger.info(f"[Storage] Upload {file.filename} bucket={bucket}")
    conteudo = await file.read()
    return svc.upload(
        conteudo,
        file.filename or "arquivo",
        content_type=file.content_type,
        bucket=bucket,
        related_type=related_type,
        related_id=related_id,
        tags=_tags(tags),
        usuario_id=current_user.id,
    )


@router.get("/arquivos", response_model=List[ArquivoOut])
def listar_arquivos(
    prefixo: Optional[str] = Query(None),
    related_id: Optional[str] = Query(None),
    related_type: Optional[str] = Query(None),
    tags: Optional[str] = Query(None, description="Tags separadas por vírgula"),
    limit: int = Query(100, ge=1, le=500),
    svc: StorageService = Depends(get_storage_service),
):
    return svc.listar(prefixo=prefixo, related_id=related_id, related_type=related_type, tags=_tags(tags), limit=limit)


@router.get("/arquivos/{id}/url", response_model=ArquivoUrlResponse)
def url_arquivo(id: int, svc: StorageService = Depends(get_storage_service)):
    return ArquivoUrlResponse(id=id, url=svc.url(id))


@router.put("/arquivos/{id}/metadata", response_model=ArquivoOut)
def atualizar_metadata(id: int, data: ArquivoMetadataUpdate, svc: StorageService = Depends(get_storage_service)):
    return svc.atualizar_metadata(id, metadata=data.metadata, tags=data.tags)


@router.delete("/arquivos/{id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_arquivo(id: int, svc: StorageService = Depends(get_storage_service)):
    svc.deletar(id)
