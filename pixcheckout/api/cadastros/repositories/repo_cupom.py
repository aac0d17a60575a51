from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.models.model_cupom import CupomModel


class CupomRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, id_: int) -> CupomModel | None:
        return self.db.query(CupomModel).filter(CupomModel.id == id_).first()

    def get_by_code(self, codigo: str) -> CupomModel | None:
        return self.db.query(CupomModel).filter(CupomModel.code == codigo).first()

    def get_ativo_by_code(self, codigo: str) -> CupomModel | None:
        return (
            self.db.query(CupomModel)
            .filter(CupomModel.code == codigo, CupomModel.active.is_(True))
            .first()
        )

    def list(self):
        return self.db.query(CupomModel).order_by(CupomModel.created_at.desc(), CupomModel.id.desc()).all()

    def incrementar_uso(self, cupom_id: int) -> int:
        """Incremento atômico no banco (current_uses = current_uses + 1)."""
        return (
            self.db.query(CupomModel)
            .filter(CupomModel.id == cupom_id)
            .update({CupomModel.current_uses: CupomModel.current_uses + 1}, synchronize_session=False)
        )

    def create(self, obj: CupomModel) -> CupomModel:
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj: CupomModel) -> CupomModel:
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: CupomModel):
        self.db.delete(obj)
        self.db.commit()
