from __future__ import annotations

import asyncio
import calendar
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from slugify import slugify
from sqlalchemy.orm import Session

from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.relatorios.models.model_relatorio import AgendamentoRelatorioModel, RelatorioLogModel
from pixcheckout.api.relatorios.repositories.repository import RelatorioRepository
from pixcheckout.api.relatorios.schemas.schema_relatorio import AgendamentoCreate, AgendamentoUpdate
from pixcheckout.api.relatorios.services.render_pdf import gerar_pdf
from pixcheckout.api.relatorios.services.render_planilha import gerar_planilha
from pixcheckout.api.relatorios.services.service_dados import RelatorioDadosService, data_br
from pixcheckout.utils.database_utils import now_trimmed, as_aware
from pixcheckout.utils.logger import logger

BUCKET_RELATORIOS = "reports"
JANELA_AGENDAMENTO = timedelta(days=30)

FORMATOS = {
    "pdf": ("pdf", "application/pdf"),
    "excel": ("csv", "text/csv"),
}


def calcular_proxima_execucao(frequencia: str, base: Optional[datetime] = None) -> datetime:
    """
    daily +1 dia, weekly +7 dias, monthly mesmo dia do mês seguinte
    (limitado ao último dia quando o mês seguinte é mais curto).
    """
    base = as_aware(base) if base else now_trimmed()
    if frequencia == "daily":
        return base + timedelta(days=1)
    if frequencia == "weekly":
        return base + timedelta(days=7)
    if frequencia == "monthly":
        ano, mes = (base.year + 1, 1) if base.month == 12 else (base.year, base.month + 1)
        dia = min(base.day, calendar.monthrange(ano, mes)[1])
        return base.replace(year=ano, month=mes, day=dia)
    raise ValueError(f"Frequência inválida: {frequencia}")


class RelatoriosService:
    def __init__(self, db: Session, storage=None):
        self.db = db
        self.repo = RelatorioRepository(db)
        self.dados = RelatorioDadosService(self.repo)
        self._storage = storage

    @property
    def storage(self):
        if self._storage is None:
            from pixcheckout.api.storage.services.service_storage import StorageService

            self._storage = StorageService(self.db)
        return self._storage

    # ---------------- GERAÇÃO ----------------
    def dados_relatorio(self, tipo: str, inicio: datetime, fim: datetime) -> dict:
        self._validar_periodo(inicio, fim)
        return self.dados.montar(tipo, inicio, fim).metricas

    def gerar(
        self,
        tipo: str,
        formato: str,
        inicio: datetime,
        fim: datetime,
        nome_base: Optional[str] = None,
    ) -> Tuple[str, bytes, str]:
        """Retorna (nome_arquivo, conteúdo, media_type)."""
        self._validar_periodo(inicio, fim)
        if formato not in FORMATOS:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Formato inválido: {formato}")

        relatorio = self.dados.montar(tipo, inicio, fim)
        extensao, media_type = FORMATOS[formato]
        conteudo = gerar_pdf(relatorio) if formato == "pdf" else gerar_planilha(relatorio)

        carimbo = relatorio.gerado_em.strftime("%Y-%m-%d-%H-%M")
        nome = f"{slugify(nome_base or relatorio.titulo)}-{carimbo}.{extensao}"
        logger.info(f"[Relatorios] Gerado {nome} ({len(conteudo)} bytes)")
        return nome, conteudo, media_type

    @staticmethod
    def _validar_periodo(inicio: datetime, fim: datetime):
        if as_aware(inicio) > as_aware(fim):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Data inicial maior que a data final")

    # ---------------- AGENDAMENTOS ----------------
    def criar_agendamento(self, data: AgendamentoCreate, usuario_id: Optional[int] = None) -> AgendamentoRelatorioModel:
        payload = data.model_dump()
        agendamento = AgendamentoRelatorioModel(
            **payload,
            next_run=calcular_proxima_execucao(data.frequency),
            created_by=usuario_id,
        )
        self.repo.add(agendamento)
        logger.info(f"[Relatorios] Agendamento {agendamento.id} criado ({agendamento.frequency})")
        return agendamento

    def atualizar_agendamento(self, agendamento_id: int, data: AgendamentoUpdate) -> AgendamentoRelatorioModel:
        agendamento = self.get_agendamento(agendamento_id)
        valores = data.model_dump(exclude_unset=True)
        for key, value in valores.items():
            setattr(agendamento, key, value)
        if "frequency" in valores:
            agendamento.next_run = calcular_proxima_execucao(agendamento.frequency, agendamento.last_run)
        self.db.flush()
        return agendamento

    def remover_agendamento(self, agendamento_id: int):
        self.repo.delete(self.get_agendamento(agendamento_id))

    def listar_agendamentos(self) -> List[AgendamentoRelatorioModel]:
        return self.repo.list_agendamentos()

    def get_agendamento(self, agendamento_id: int) -> AgendamentoRelatorioModel:
        agendamento = self.repo.get_agendamento(agendamento_id)
        if not agendamento:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Agendamento não encontrado")
        return agendamento

    def listar_logs(self, schedule_id: Optional[int] = None, limit: int = 100) -> List[RelatorioLogModel]:
        return self.repo.list_logs(schedule_id, limit)

    # ---------------- EXECUÇÃO ----------------
    def _gerar_e_armazenar(self, agendamento: AgendamentoRelatorioModel, inicio: datetime, fim: datetime):
        nome, conteudo, media_type = self.gerar(
            agendamento.type, agendamento.format, inicio, fim, nome_base=agendamento.name
        )
        return self.storage.upload(
            conteudo,
            nome,
            media_type,
            bucket=BUCKET_RELATORIOS,
            related_type="report",
            related_id=str(agendamento.id),
            metadata={"reportType": agendamento.type, "format": agendamento.format},
        )

    async def executar_agendamento(self, agendamento_id: int) -> RelatorioLogModel:
        """
        Gera o relatório dos últimos 30 dias, envia ao storage e manda o link por e-mail
        a cada destinatário. Falhas ficam registradas em report_logs e não são propagadas.
        """
        agendamento = self.get_agendamento(agendamento_id)
        fim = now_trimmed()
        inicio = fim - JANELA_AGENDAMENTO
        destinatarios = list(agendamento.recipients or [])

        try:
            # render e upload são bloqueantes; rodam fora do event loop
            arquivo = await asyncio.to_thread(self._gerar_e_armazenar, agendamento, inicio, fim)

            email = EmailService(self.db)
            enviados, falhas = 0, []
            for destinatario in destinatarios:
                resultado = await email.enviar(
                    destinatario,
                    "scheduled_report",
                    {
                        "reportName": agendamento.name,
                        "startDate": data_br(inicio, False),
                        "endDate": data_br(fim, False),
                        "fileUrl": arquivo.url,
                    },
                )
                if resultado.success:
                    enviados += 1
                else:
                    falhas.append(destinatario)

            agendamento.last_run = fim
            agendamento.next_run = calcular_proxima_execucao(agendamento.frequency, fim)
            log = RelatorioLogModel(
                schedule_id=agendamento.id,
                status="success",
                recipients=destinatarios,
                file_url=arquivo.url,
                meta={
                    "reportType": agendamento.type,
                    "format": agendamento.format,
                    "fileId": arquivo.id,
                    "emailsSent": enviados,
                    "emailsFailed": falhas,
                },
            )
            logger.info(f"[Relatorios] Agendamento {agendamento.id} executado; emails enviados={enviados}")
        except Exception as e:
            logger.error(f"[Relatorios] Falha ao executar agendamento {agendamento.id}: {e}")
            detalhe = e.detail if isinstance(e, HTTPException) else str(e)
            log = RelatorioLogModel(
                schedule_id=agendamento.id,
                status="failed",
                recipients=destinatarios,
                error=str(detalhe),
                meta={"reportType": agendamento.type, "format": agendamento.format},
            )

        return self.repo.add(log)

    async def executar_pendentes(self) -> int:
        vencidos = self.repo.agendamentos_vencidos(now_trimmed())
        for agendamento in vencidos:
            await self.executar_agendamento(agendamento.id)
            self.db.commit()
        if vencidos:
            logger.info(f"[Relatorios] {len(vencidos)} agendamento(s) executado(s)")
        return len(vencidos)
