from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pixcheckout.api.auditoria.schemas.schema_auditoria import AuditoriaOut
from pixcheckout.api.auditoria.services.service_auditoria import AuditoriaService
from pixcheckout.core.admin_dependencies import require_admin
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/auditoria/admin",
    tags=["Admin - Auditoria"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=List[AuditoriaOut])
def listar_auditoria(
    tabela: Optional[str] = Query(None),
    acao: Optional[str] = Query(None),
    usuario_id: Optional[int] = Query(None),
    inicio: Optional[datetime] = Query(None),
    fim: Optional[datetime] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return AuditoriaService(db).listar(
        tabela=tabela,
        acao=acao,
        usuario_id=usuario_id,
        inicio=inicio,
        fim=fim,
        skip=skip,
        limit=limit,
    )
