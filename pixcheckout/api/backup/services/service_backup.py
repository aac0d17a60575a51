import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import Date, DateTime, Numeric, func, text
from sqlalchemy.orm import Session

from pixcheckout.api.backup.models.model_backup import BackupLogModel
from pixcheckout.api.cadastros.models.model_cliente import ClienteModel
from pixcheckout.api.cadastros.models.model_cupom import CupomModel
from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.configuracoes.models.model_configuracao import ConfiguracaoModel
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.storage.models.model_arquivo import ArquivoModel
from pixcheckout.utils.database_utils import now_trimmed, to_iso
from pixcheckout.utils.logger import logger

VERSAO_BACKUP = "1.0"

# Ordem de inserção respeitando as chaves estrangeiras; a remoção usa a ordem inversa
TABELAS = {
    "products": ProdutoModel,
    "customers": ClienteModel,
    "coupons": CupomModel,
    "settings": ConfiguracaoModel,
    "files": ArquivoModel,
    "orders": PedidoModel,
}


def _serializar(valor: Any) -> Any:
    if isinstance(valor, (datetime, date)):
        return valor.isoformat()
    if isinstance(valor, Decimal):
        return str(valor)
    return valor


def _desserializar(coluna, valor: Any) -> Any:
    if valor is None:
        return None
    if isinstance(coluna.type, DateTime) and isinstance(valor, str):
        return datetime.fromisoformat(valor)
    if isinstance(coluna.type, Date) and isinstance(valor, str):
        return date.fromisoformat(valor)
    if isinstance(coluna.type, Numeric) and not isinstance(valor, Decimal):
        return Decimal(str(valor))
    return valor


def nome_arquivo_backup(momento: Optional[datetime] = None) -> str:
    return f"backup-{(momento or now_trimmed()).strftime('%Y-%m-%d-%H-%M')}.json"


class BackupService:
    def __init__(self, db: Session):
        self.db = db

    def _registrar(self, tipo: str, status_log: str, tabelas: List[str], usuario_id: Optional[int], **extra) -> BackupLogModel:
        log = BackupLogModel(type=tipo, status=status_log, tables=tabelas, created_by=usuario_id, **extra)
        self.db.add(log)
        self.db.flush()
        return log

    def listar_logs(self, limit: int = 50) -> List[BackupLogModel]:
        return (
            self.db.query(BackupLogModel)
            .order_by(BackupLogModel.created_at.desc(), BackupLogModel.id.desc())
            .limit(limit)
            .all()
        )

    def _linhas(self, tabela: str) -> List[Dict[str, Any]]:
        table = TABELAS[tabela].__table__
        linhas = self.db.execute(table.select().order_by(table.c.id)).mappings().all()
        return [{chave: _serializar(valor) for chave, valor in linha.items()} for linha in linhas]

    def gerar(self, tabelas: List[str], usuario_id: Optional[int] = None) -> Tuple[str, bytes]:
        """Retorna (nome do arquivo, conteúdo JSON); o resultado fica em backup_logs."""
        agora = now_trimmed()
        nome = nome_arquivo_backup(agora)
        selecionadas = [t for t in TABELAS if t in set(tabelas)]
        try:
            backup = {
                "version": VERSAO_BACKUP,
                "timestamp": to_iso(agora),
                "data": {tabela: self._linhas(tabela) for tabela in selecionadas},
            }
            conteudo = json.dumps(backup, ensure_ascii=False, indent=2).encode("utf-8")
        except Exception as e:
            logger.error(f"[Backup] Falha ao gerar backup: {e}")
            self._registrar("backup", "failed", selecionadas, usuario_id, file_name=nome, error=str(e))
            self.db.commit()
            raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro ao gerar backup")

        self._registrar("backup", "success", selecionadas, usuario_id, file_name=nome, file_size=len(conteudo))
        logger.info(f"[Backup] Backup {nome} gerado ({len(conteudo)} bytes) tabelas={selecionadas}")
        return nome, conteudo

    @staticmethod
    def validar(conteudo: bytes) -> Dict[str, List[Dict[str, Any]]]:
        try:
            backup = json.loads(conteudo)
        except (ValueError, UnicodeDecodeError):
            raise ValueError("Arquivo de backup inválido")
        if not isinstance(backup, dict) or not backup.get("version") or not backup.get("timestamp") \
                or not isinstance(backup.get("data"), dict):
            raise ValueError("Arquivo de backup inválido")
        if str(backup["version"]) != VERSAO_BACKUP:
            raise ValueError(f"Versão de backup não suportada: {backup['version']}")
        desconhecidas = [t for t in backup["data"] if t not in TABELAS]
        if desconhecidas:
            raise ValueError(f"Tabela desconhecida no backup: {', '.join(desconhecidas)}")
        for tabela, linhas in backup["data"].items():
            if not isinstance(linhas, list):
                raise ValueError(f"Dados inválidos para a tabela {tabela}")
        return backup["data"]

    def _ajustar_sequencia(self, tabela: str):
        if self.db.get_bind().dialect.name != "postgresql":
            return
        self.db.execute(
            text(
                f"SELECT setval(pg_get_serial_sequence('{tabela}', 'id'), "
                f"COALESCE((SELECT MAX(id) FROM {tabela}), 0) + 1, false)"
            )
        )

    def restaurar(self, conteudo: bytes, nome_arquivo: Optional[str] = None, usuario_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Para cada tabela do backup: apaga tudo e reinsere as linhas.
        A operação é atômica; falhas desfazem tudo e ficam registradas em backup_logs.
        """
        try:
            dados = self.validar(conteudo)
        except ValueError as e:
            self._registrar("restore", "failed", [], usuario_id, file_name=nome_arquivo,
                            file_size=len(conteudo), error=str(e))
            self.db.commit()
            logger.warning(f"[Backup] Restauração recusada: {e}")
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))

        ordem = [t for t in TABELAS if t in dados]
        total = 0
        try:
            for tabela in reversed(ordem):
                self.db.execute(TABELAS[tabela].__table__.delete())
            for tabela in ordem:
                table = TABELAS[tabela].__table__
                linhas = [
                    {c.name: _desserializar(c, linha.get(c.name)) for c in table.columns if c.name in linha}
                    for linha in dados[tabela]
                ]
                if linhas:
                    self.db.execute(table.insert(), linhas)
                    self._ajustar_sequencia(tabela)
                total += len(linhas)
        except Exception as e:
            self.db.rollback()
            logger.error(f"[Backup] Erro ao restaurar backup: {e}")
            self._registrar("restore", "failed", ordem, usuario_id, file_name=nome_arquivo,
                            file_size=len(conteudo), error=str(e))
            self.db.commit()
            raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Erro ao restaurar backup")

        self._registrar("restore", "success", ordem, usuario_id, file_name=nome_arquivo, file_size=len(conteudo))
        self.db.commit()
        logger.info(f"[Backup] Backup restaurado: {total} registro(s) em {ordem}")
        return {"success": True, "tables": ordem, "registros": total}

    def contagem(self) -> Dict[str, int]:
        return {
            tabela: self.db.query(func.count()).select_from(modelo.__table__).scalar() or 0
            for tabela, modelo in TABELAS.items()
        }
