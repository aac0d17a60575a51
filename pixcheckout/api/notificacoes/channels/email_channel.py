import asyncio
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Dict, Any, List, Optional

from .base_channel import BaseNotificationChannel, NotificationResult


class EmailChannel(BaseNotificationChannel):
    """Canal de notificação por email (SMTP)"""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.smtp_server = config.get('smtp_server')
        self.smtp_port = int(config.get('smtp_port', 587))
        self.username = config.get('username')
        self.password = config.get('password')
        self.from_email = config.get('from_email') or self.username
        self.from_name = config.get('from_name', 'Checkout Pix')

        if not self.validate_config(config):
            raise ValueError("Configuração inválida para canal de email")

    def validate_config(self, config: Dict[str, Any]) -> bool:
        required_fields = ['smtp_server', 'username', 'password']
        return all(config.get(field) for field in required_fields)

    def get_channel_name(self) -> str:
        return "Email"

    def _montar_mensagem(self, recipient: str, title: str, html: str, cc: List[str]) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = title
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = recipient
        if cc:
            msg['Cc'] = ", ".join(cc)
        msg.attach(MIMEText(html, 'html', 'utf-8'))
        return msg

    def _enviar_smtp(self, msg: MIMEMultipart):
        context = ssl.create_default_context()
        if self.smtp_port == 465:
            with smtplib.SMTP_SSL(self.smtp_server, self.smtp_port, context=context) as server:
                server.login(self.username, self.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls(context=context)
                server.login(self.username, self.password)
                server.send_message(msg)

    async def send(
        self,
        recipient: str,
        title: str,
        message: str,
        channel_metadata: Optional[Dict[str, Any]] = None
    ) -> NotificationResult:
        """Envia o email; `message` já é o HTML renderizado."""
        cc = list((channel_metadata or {}).get("cc") or [])
        try:
            msg = self._montar_mensagem(recipient, title, message, cc)
            # smtplib é bloqueante
            await asyncio.to_thread(self._enviar_smtp, msg)
            self._log_success(recipient)
            return self._create_success_result("Email enviado com sucesso")
        except Exception as e:
            error_msg = f"Erro ao enviar email: {str(e)}"
            self._log_error(recipient, error_msg)
            return self._create_error_result(error_msg, {"exception": str(e)})
