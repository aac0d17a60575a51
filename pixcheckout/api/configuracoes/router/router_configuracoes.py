from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pixcheckout.api.configuracoes.schemas.schema_configuracao import ConfiguracoesOut, ConfiguracoesUpdate
from pixcheckout.api.configuracoes.services.service_configuracao import ConfiguracoesService
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.admin_dependencies import get_current_user, require_admin
from pixcheckout.database.db_connection import get_db

router = APIRouter(
    prefix="/api/configuracoes/admin",
    tags=["Admin - Configuracoes"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=ConfiguracoesOut)
def obter_configuracoes(db: Session = Depends(get_db)):
    return ConfiguracoesService(db).obter()


@router.put("", response_model=ConfiguracoesOut)
def atualizar_configuracoes(
    data: ConfiguracoesUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_admin),
):
    return ConfiguracoesService(db).atualizar(data, usuario_id=current_user.id)
