from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.schemas.schema_cliente import ClienteDetalhe, ClienteOut
from pixcheckout.api.cadastros.services.service_cliente import ClientesService
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/cadastros/admin/clientes",
    tags=["Admin - Cadastros - Clientes"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[ClienteOut])
def listar_clientes(
    busca: Optional[str] = Query(None, description="Nome, e-mail ou CPF"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return ClientesService(db).list(busca=busca, skip=skip, limit=limit)


@router.get("/{cliente_id}", response_model=ClienteDetalhe)
def detalhe_cliente(cliente_id: int, db: Session = Depends(get_db)):
    return ClientesService(db).detalhe(cliente_id)
