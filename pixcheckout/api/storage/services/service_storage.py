import io
import mimetypes
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.storage.models.model_arquivo import ArquivoModel
from pixcheckout.utils import minio_client
from pixcheckout.utils.logger import logger


class StorageService:
    """Arquivos no MinIO com registro na tabela files."""

    def __init__(self, db: Session, client=None):
        self.db = db
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = minio_client.get_minio_client()
        return self._client

    @staticmethod
    def montar_caminho(related_type: Optional[str], nome_arquivo: str, content_type: Optional[str] = None) -> str:
        """<relatedType>/<uuid>.<ext>"""
        ext = ""
        if "." in (nome_arquivo or ""):
            ext = "." + nome_arquivo.rsplit(".", 1)[1].lower()
        elif content_type:
            ext = mimetypes.guess_extension(content_type) or ""
        prefixo = minio_client.normalizar_nome_bucket(related_type or "geral") or "geral"
        return f"{prefixo}/{uuid.uuid4()}{ext}"

    def upload(
        self,
        conteudo: bytes,
        nome_arquivo: str,
        content_type: Optional[str] = None,
        bucket: str = "files",
        related_type: Optional[str] = None,
        related_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        usuario_id: Optional[int] = None,
    ) -> ArquivoModel:
        bucket = minio_client.normalizar_nome_bucket(bucket)
        caminho = self.montar_caminho(related_type, nome_arquivo, content_type)
        content_type = content_type or mimetypes.guess_type(nome_arquivo)[0] or "application/octet-stream"
        try:
            url = minio_client.enviar_objeto(
                bucket, caminho, io.BytesIO(conteudo), len(conteudo), content_type, client=self.client
            )
        except Exception as e:
            logger.error(f"[Storage] Falha ao enviar {nome_arquivo}: {e}")
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, "Falha ao enviar arquivo para o storage")

        arquivo = ArquivoModel(
            bucket=bucket,
            path=caminho,
            name=nome_arquivo,
            size=len(conteudo),
            mime_type=content_type,
            url=url,
            meta=metadata or {},
            tags=tags or [],
            related_id=str(related_id) if related_id is not None else None,
            related_type=related_type,
            uploaded_by=usuario_id,
        )
        self.db.add(arquivo)
        self.db.flush()
        logger.info(f"[Storage] Arquivo {arquivo.id} salvo em {bucket}/{caminho} ({arquivo.size} bytes)")
        return arquivo

    def get(self, arquivo_id: int) -> ArquivoModel:
        arquivo = self.db.query(ArquivoModel).filter(ArquivoModel.id == arquivo_id).first()
        if not arquivo:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Arquivo não encontrado")
        return arquivo

    def url(self, arquivo_id: int) -> str:
        arquivo = self.get(arquivo_id)
        return arquivo.url or minio_client.url_publica(arquivo.bucket, arquivo.path)

    def deletar(self, arquivo_id: int):
        arquivo = self.get(arquivo_id)
        if not minio_client.remover_objeto(arquivo.bucket, arquivo.path, client=self.client):
            logger.warning(f"[Storage] Objeto {arquivo.bucket}/{arquivo.path} não removido do MinIO")
        self.db.delete(arquivo)
        self.db.flush()
        logger.info(f"[Storage] Arquivo {arquivo_id} removido")

    def listar(
        self,
        prefixo: Optional[str] = None,
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
        tags: Optional[List[str]] = None,
        limit: int = 100,
    ) -> List[ArquivoModel]:
        q = self.db.query(ArquivoModel)
        if prefixo:
            q = q.filter(ArquivoModel.path.startswith(prefixo))
        if related_id:
            q = q.filter(ArquivoModel.related_id == str(related_id))
        if related_type:
            q = q.filter(ArquivoModel.related_type == related_type)
        arquivos = q.order_by(ArquivoModel.created_at.desc(), ArquivoModel.id.desc()).all()
        if tags:
            # Filtro em Python: JSON não tem operador portátil entre SQLite e Postgres
            arquivos = [a for a in arquivos if set(tags).issubset(set(a.tags or []))]
        return arquivos[:limit]

    def atualizar_metadata(
        self,
        arquivo_id: int,
        metadata: Optional[Dict[str, Any]] = None,
        tags: Optional[List[str]] = None,
    ) -> ArquivoModel:
        arquivo = self.get(arquivo_id)
        if metadata is not None:
            arquivo.meta = {**(arquivo.meta or {}), **metadata}
        if tags is not None:
            arquivo.tags = list(tags)
        self.db.flush()
        return arquivo
