from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.schemas.schema_cupom import CupomCreate, CupomOut, CupomUpdate
from pixcheckout.api.cadastros.services.service_cupom import CuponsService
from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.database.db_connection import get_db
from pixcheckout.utils.logger import logger

router = APIRouter(
    prefix="/api/cadastros/admin/cupons",
    tags=["Admin - Cadastros - Cupons"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[CupomOut])
def listar_cupons(db: Session = Depends(get_db)):
    return CuponsService(db).list()


@router.get("/{cupom_id}", response_model=CupomOut)
def get_cupom(cupom_id: int, db: Session = Depends(get_db)):
    return CuponsService(db).get(cupom_id)


@router.post("", response_model=CupomOut, status_code=status.HTTP_201_CREATED)
def criar_cupom(payload: CupomCreate, db: Session = Depends(get_db)):
    logger.info(f"[Cupons] Criar - {payload.code}")
    return CuponsService(db).create(payload)


@router.put("/{cupom_id}", response_model=CupomOut)
def atualizar_cupom(cupom_id: int, payload: CupomUpdate, db: Session = Depends(get_db)):
    return CuponsService(db).update(cupom_id, payload)


@router.patch("/{cupom_id}/toggle", response_model=CupomOut)
def alternar_cupom(cupom_id: int, db: Session = Depends(get_db)):
    return CuponsService(db).toggle(cupom_id)


@router.delete("/{cupom_id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_cupom(cupom_id: int, db: Session = Depends(get_db)):
    CuponsService(db).delete(cupom_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
