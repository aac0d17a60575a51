from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from pixcheckout.api.pagamentos.schemas.schema_webhook import WebhookResponse
from pixcheckout.api.pagamentos.services.service_webhook import WebhookService
from pixcheckout.database.db_connection import get_db

router = APIRouter(prefix="/api/pagamentos/webhook", tags=["Pagamentos - Webhook"])


@router.post("/primepag", response_model=WebhookResponse)
async def webhook_primepag(
    request: Request,
    x_primepag_signature: Optional[str] = Header(None, alias="x-primepag-signature"),
    db: Session = Depends(get_db),
):
    """Recebe a notificação da PrimePag; autenticado pela assinatura HMAC do corpo."""
    corpo = await request.body()
    return await WebhookService(db).processar(corpo, x_primepag_signature)
