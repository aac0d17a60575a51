from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.seguranca.models.model_seguranca import TentativaLoginModel, IpBloqueadoModel
from pixcheckout.api.seguranca.repositories.repo_seguranca import SegurancaRepository
from pixcheckout.api.seguranca.schemas.schema_seguranca import IpBloqueadoCreate
from pixcheckout.utils.database_utils import now_trimmed, as_aware
from pixcheckout.utils.logger import logger


class SegurancaService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SegurancaRepository(db)

    def registrar_tentativa_login(
        self,
        username: str,
        ip: Optional[str],
        sucesso: bool,
        user_agent: Optional[str] = None,
    ) -> TentativaLoginModel:
        return self.repo.registrar_tentativa(
            TentativaLoginModel(
                username=username,
                ip=ip,
                sucesso=sucesso,
                user_agent=(user_agent or "")[:255] or None,
            )
        )

    def listar_tentativas(self, sucesso: Optional[bool] = None, ip: Optional[str] = None, limit: int = 100):
        return self.repo.listar_tentativas(sucesso=sucesso, ip=ip, limit=limit)

    def ip_bloqueado(self, ip: Optional[str]) -> bool:
        if not ip:
            return False
        bloqueio = self.repo.get_ip(ip)
        if not bloqueio:
            return False
        if bloqueio.bloqueado_ate is None:
            return True
        return as_aware(bloqueio.bloqueado_ate) > now_trimmed()

    def garantir_ip_liberado(self, ip: Optional[str]):
        if self.ip_bloqueado(ip):
            logger.warning(f"[Seguranca] Requisição recusada de IP bloqueado: {ip}")
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Acesso bloqueado para este IP")

    def bloquear_ip(self, data: IpBloqueadoCreate) -> IpBloqueadoModel:
        if self.repo.get_ip(data.ip):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "IP já está bloqueado")
        bloqueio = self.repo.create(IpBloqueadoModel(**data.model_dump()))
        logger.info(f"[Seguranca] IP bloqueado: {data.ip} motivo={data.motivo}")
        return bloqueio

    def listar_bloqueios(self):
        return self.repo.listar_bloqueios()

    def desbloquear(self, bloqueio_id: int):
        bloqueio = self.repo.get_bloqueio(bloqueio_id)
        if not bloqueio:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Bloqueio não encontrado")
        self.repo.delete(bloqueio)
        logger.info(f"[Seguranca] IP desbloqueado: {bloqueio.ip}")
