from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.schemas.schema_link_pagamento import LinkPagamentoCreate, LinkPagamentoOut
from pixcheckout.api.cadastros.services.service_link_pagamento import LinksPagamentoService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/cadastros/admin/links-pagamento",
    tags=["Admin - Cadastros - Links de Pagamento"],
    dependencies=[Depends(get_current_user)],
)


def _out(link) -> LinkPagamentoOut:
    out = LinkPagamentoOut.model_validate(link)
    out.url = LinksPagamentoService.montar_url(link)
    return out


@router.get("", response_model=List[LinkPagamentoOut])
def listar_links(
    status_filtro: Optional[Literal["active", "expired", "used"]] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return [_out(link) for link in LinksPagamentoService(db).listar(status_filtro)]


@router.post("", response_model=LinkPagamentoOut, status_code=status.HTTP_201_CREATED)
def criar_link(
    payload: LinkPagamentoCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return _out(LinksPagamentoService(db).criar(payload, usuario_id=current_user.id))
