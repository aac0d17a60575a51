from typing import Dict, List

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile
from sqlalchemy.orm import Session

from pixcheckout.api.backup.schemas.schema_backup import BackupLogOut, GerarBackupRequest, RestauracaoResponse
from pixcheckout.api.backup.services.service_backup import BackupService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import require_admin
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/backup/admin",
    tags=["Admin - Backup"],
    dependencies=[Depends(require_admin)],
)


@router.post("/gerar")
def gerar_backup(
    payload: GerarBackupRequest,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_admin),
):
    """Gera o backup das tabelas selecionadas e devolve o arquivo JSON para download."""
    nome, conteudo = BackupService(db).gerar(payload.tables, usuario_id=current_user.id)
    return Response(
        content=conteudo,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{nome}"'},
    )


@router.post("/restaurar", response_model=RestauracaoResponse)
async def restaurar_backup(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_admin),
):
    conteudo = await file.read()
    return BackupService(db).restaurar(conteudo, nome_arquivo=file.filename, usuario_id=current_user.id)


@router.get("/logs", response_model=List[BackupLogOut])
def listar_logs(limit: int = Query(50, ge=1, le=200), db: Session = Depends(get_db)):
    return BackupService(db).listar_logs(limit)


@router.get("/contagem", response_model=Dict[str, int])
def contagem_registros(db: Session = Depends(get_db)):
    return BackupService(db).contagem()
