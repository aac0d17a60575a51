from typing import Optional

from sqlalchemy.orm import Session

from pixcheckout.api.seguranca.models.model_seguranca import TentativaLoginModel, IpBloqueadoModel


class SegurancaRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---------------- TENTATIVAS DE LOGIN ----------------
    def registrar_tentativa(self, obj: TentativaLoginModel) -> TentativaLoginModel:
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def listar_tentativas(self, sucesso: Optional[bool] = None, ip: Optional[str] = None, limit: int = 100):
        query = self.db.query(TentativaLoginModel)
        if sucesso is not None:
            query = query.filter(TentativaLoginModel.sucesso == sucesso)
        if ip:
            query = query.filter(TentativaLoginModel.ip == ip)
        return query.order_by(TentativaLoginModel.created_at.desc(), TentativaLoginModel.id.desc()).limit(limit).all()

    # ---------------- IPS BLOQUEADOS ----------------
    def get_ip(self, ip: str) -> IpBloqueadoModel | None:
        return self.db.query(IpBloqueadoModel).filter(IpBloqueadoModel.ip == ip).first()

    def get_bloqueio(self, id_: int) -> IpBloqueadoModel | None:
        return self.db.query(IpBloqueadoModel).filter(IpBloqueadoModel.id == id_).first()

    def listar_bloqueios(self):
        return self.db.query(IpBloqueadoModel).order_by(IpBloqueadoModel.created_at.desc()).all()

    def create(self, obj: IpBloqueadoModel) -> IpBloqueadoModel:
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: IpBloqueadoModel):
        self.db.delete(obj)
        self.db.commit()
