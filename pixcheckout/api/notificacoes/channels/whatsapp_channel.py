from typing import Dict, Any, Optional

import httpx

from .base_channel import BaseNotificationChannel, NotificationResult


class WhatsAppChannel(BaseNotificationChannel):
    """Canal de notificação via gateway WhatsApp Business (POST {api_url}/messages)"""

    def __init__(self, config: Dict[str, Any], timeout: float = 30.0):
        super().__init__(config)
        self.api_url = (config.get('api_url') or '').rstrip('/')
        self.api_key = config.get('api_key')
        self.instance_id = config.get('instance_id')
        self.timeout = timeout

        if not self.validate_config(config):
            raise ValueError("Configuração inválida para canal de WhatsApp")

    def validate_config(self, config: Dict[str, Any]) -> bool:
        required_fields = ['api_url', 'api_key', 'instance_id']
        return all(config.get(field) for field in required_fields)

    def get_channel_name(self) -> str:
        return "WhatsApp"

    def _format_phone_number(self, phone: str) -> str:
        """Remove caracteres especiais e garante o código do país (55)."""
        phone = ''.join(filter(str.isdigit, phone))
        if not phone.startswith('55'):
            phone = '55' + phone
        return phone

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def send(
        self,
        recipient: str,
        title: str,
        message: str,
        channel_metadata: Optional[Dict[str, Any]] = None
    ) -> NotificationResult:
        phone_formatted = self._format_phone_number(recipient)
        payload = {
            "instance_id": self.instance_id,
            "to": phone_formatted,
            "message": message,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.api_url}/messages", json=payload, headers=self._get_headers())

            if response.is_success:
                body = response.json() if response.content else {}
                message_id = body.get("message_id")
                self._log_success(phone_formatted, message_id)
                return self._create_success_result(
                    "Mensagem WhatsApp enviada com sucesso",
                    external_id=message_id
                )

            error_msg = f"Falha ao enviar mensagem WhatsApp (HTTP {response.status_code})"
            self._log_error(phone_formatted, error_msg, {"body": response.text[:500]})
            return self._create_error_result(error_msg, {"status_code": response.status_code})

        except Exception as e:
            error_msg = f"Erro ao enviar WhatsApp: {str(e)}"
            self._log_error(phone_formatted, error_msg)
            return self._create_error_result(error_msg, {"exception": str(e)})
