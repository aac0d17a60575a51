from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional

from pixcheckout.utils.database_utils import now_trimmed
from pixcheckout.utils.logger import logger


@dataclass
class NotificationResult:
    """Resultado de um envio (e-mail, WhatsApp); vira linha em email_logs/whatsapp_logs."""

    success: bool
    message: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None
    external_id: Optional[str] = None
    sent_at: Optional[datetime] = field(default=None)

    def __post_init__(self):
        if self.success and self.sent_at is None:
            self.sent_at = now_trimmed()


class BaseNotificationChannel(ABC):
    """Canal de saída. send() nunca levanta: falhas voltam como NotificationResult(success=False)."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    @abstractmethod
    async def send(
        self,
        recipient: str,
        title: str,
        message: str,
        channel_metadata: Optional[Dict[str, Any]] = None
    ) -> NotificationResult:
        """recipient é e-mail ou telefone conforme o canal; message já vem renderizada."""

    @abstractmethod
    def validate_config(self, config: Dict[str, Any]) -> bool:
        ...

    @abstractmethod
    def get_channel_name(self) -> str:
        ...

    def _log_success(self, recipient: str, external_id: Optional[str] = None):
        sufixo = f" (id={external_id})" if external_id else ""
        logger.info(f"[{self.get_channel_name()}] Enviado para {recipient}{sufixo}")

    def _log_error(self, recipient: str, error: str, details: Optional[Dict[str, Any]] = None):
        logger.error(f"[{self.get_channel_name()}] Falha no envio para {recipient}: {error} {details or ''}".rstrip())

    def _create_error_result(self, error: str, details: Optional[Dict[str, Any]] = None) -> NotificationResult:
        return NotificationResult(False, error, error_details=details)

    def _create_success_result(self, message: str = "Enviado com sucesso", external_id: Optional[str] = None) -> NotificationResult:
        return NotificationResult(True, message, external_id=external_id)
