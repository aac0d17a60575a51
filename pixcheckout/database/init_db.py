from pixcheckout.config.settings import ADMIN_PASSWORD, ADMIN_USERNAME
from pixcheckout.utils.logger import logger
from .db_connection import Base, SessionLocal, engine


def importar_models():
    # Registra todas as tabelas no metadata antes do create_all
    from pixcheckout.api.usuarios.models.model_usuario import UserModel  # noqa: F401
    from pixcheckout.api.cadastros.models.model_produto import ProdutoModel  # noqa: F401
    from pixcheckout.api.cadastros.models.model_cliente import ClienteModel  # noqa: F401
    from pixcheckout.api.cadastros.models.model_cupom import CupomModel  # noqa: F401
    from pixcheckout.api.cadastros.models.model_link_pagamento import LinkPagamentoModel  # noqa: F401
    from pixcheckout.api.pedidos.models.model_pedido import (  # noqa: F401
        PedidoModel,
        NotaPedidoModel,
        AtualizacaoPedidoModel,
    )
    from pixcheckout.api.configuracoes.models.model_configuracao import ConfiguracaoModel  # noqa: F401
    from pixcheckout.api.auditoria.models.model_auditoria import AuditoriaModel  # noqa: F401
    from pixcheckout.api.seguranca.models.model_seguranca import TentativaLoginModel, IpBloqueadoModel  # noqa: F401
    from pixcheckout.api.notificacoes.models.model_notificacao import (  # noqa: F401
        NotificacaoModel,
        EmailLogModel,
        WhatsappLogModel,
    )
    from pixcheckout.api.storage.models.model_arquivo import ArquivoModel  # noqa: F401
    from pixcheckout.api.acessos.models.model_acesso import SolicitacaoAcessoModel, LogAcessoModel  # noqa: F401
    from pixcheckout.api.automacao.models.model_automacao import (  # noqa: F401
        WorkflowModel,
        RegraModel,
        ExecucaoAutomacaoModel,
    )
    from pixcheckout.api.analytics.models.model_analytics import (  # noqa: F401
        EventoModel,
        MetricaModel,
        PrevisaoModel,
        DashboardModel,
    )
    from pixcheckout.api.backup.models.model_backup import BackupLogModel  # noqa: F401
    from pixcheckout.api.relatorios.models.model_relatorio import (  # noqa: F401
        AgendamentoRelatorioModel,
        RelatorioLogModel,
    )


def criar_tabelas():
    importar_models()
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info(f"[DB] {len(Base.metadata.tables)} tabelas criadas/verificadas")


def criar_admin_inicial():
    from pixcheckout.api.usuarios.services.service_usuario import UserService

    db = SessionLocal()
    try:
        UserService(db).garantir_admin_inicial(ADMIN_USERNAME, ADMIN_PASSWORD)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"[DB] Erro ao criar administrador inicial: {e}")
    finally:
        db.close()


def inicializar_banco():
    logger.info("[DB] Iniciando processo de inicialização do banco de dados...")
    criar_tabelas()
    criar_admin_inicial()
    logger.info("[DB] Banco inicializado com sucesso.")
