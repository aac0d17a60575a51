from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from pixcheckout.api.seguranca.schemas.schema_seguranca import (
    IpBloqueadoCreate,
    IpBloqueadoResponse,
    TentativaLoginResponse,
)
from pixcheckout.api.seguranca.services.service_seguranca import SegurancaService
from pixcheckout.core.admin_dependencies import require_admin
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/seguranca/admin",
    tags=["Admin - Seguranca"],
    dependencies=[Depends(require_admin)],
)


@router.get("/tentativas-login", response_model=List[TentativaLoginResponse])
def listar_tentativas(
    sucesso: Optional[bool] = Query(None),
    ip: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    return SegurancaService(db).listar_tentativas(sucesso=sucesso, ip=ip, limit=limit)


@router.get("/ips-bloqueados", response_model=List[IpBloqueadoResponse])
def listar_bloqueios(db: Session = Depends(get_db)):
    return SegurancaService(db).listar_bloqueios()


@router.post("/ips-bloqueados", response_model=IpBloqueadoResponse, status_code=201)
def bloquear_ip(data: IpBloqueadoCreate, db: Session = Depends(get_db)):
    return SegurancaService(db).bloquear_ip(data)


@router.delete("/ips-bloqueados/{id}", status_code=204)
def desbloquear_ip(id: int, db: Session = Depends(get_db)):
    SegurancaService(db).desbloquear(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
