import copy
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from pixcheckout.api.configuracoes.defaults import DEFAULT_SETTINGS, SECOES
from pixcheckout.api.configuracoes.models.model_configuracao import ConfiguracaoModel
from pixcheckout.api.configuracoes.schemas.schema_configuracao import ConfiguracoesUpdate
from pixcheckout.utils.logger import logger


def _merge(defaults: Dict[str, Any], valores: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge recursivo: chaves ausentes são preenchidas com o padrão."""
    resultado = copy.deepcopy(defaults)
    for chave, valor in (valores or {}).items():
        if isinstance(valor, dict) and isinstance(resultado.get(chave), dict):
            resultado[chave] = _merge(resultado[chave], valor)
        else:
            resultado[chave] = valor
    return resultado


class ConfiguracoesService:
    def __init__(self, db: Session):
        self.db = db

    def _linha(self) -> ConfiguracaoModel | None:
        return self.db.query(ConfiguracaoModel).order_by(ConfiguracaoModel.id).first()

    def obter(self) -> Dict[str, Dict[str, Any]]:
        linha = self._linha()
        return {
            secao: _merge(DEFAULT_SETTINGS[secao], getattr(linha, secao, None) if linha else None)
            for secao in SECOES
        }

    def secao(self, nome: str) -> Dict[str, Any]:
        return self.obter()[nome]

    def atualizar(self, data: ConfiguracoesUpdate, usuario_id: int | None = None) -> Dict[str, Dict[str, Any]]:
        from pixcheckout.api.auditoria.services.service_auditoria import AuditoriaService

        antes = self.obter()
        linha = self._linha()
        if linha is None:
            linha = ConfiguracaoModel(**{secao: {} for secao in SECOES})
            self.db.add(linha)
            self.db.flush()

        payload = data.model_dump(exclude_none=True)
        for secao, valores in payload.items():
            atual = getattr(linha, secao) or {}
            # Reatribui um novo dict para o SQLAlchemy detectar a mudança no JSON
            setattr(linha, secao, _merge(atual, valores))
        linha.updated_by = usuario_id
        self.db.flush()

        depois = self.obter()
        AuditoriaService(self.db).registrar(
            tabela="settings",
            registro_id=str(linha.id),
            acao="UPDATE",
            dados_antigos=antes,
            dados_novos=depois,
            usuario_id=usuario_id,
        )
        logger.info(f"[Configuracoes] Configurações atualizadas por usuario={usuario_id}: {list(payload.keys())}")
        return depois
