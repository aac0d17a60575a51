DEFAULT_SETTINGS = {
    "whatsapp_settings": {
        "enabled": False,
        "api_url": "",
        "api_key": "",
        "instance_id": "",
        "webhook_url": "",
        "default_message": "Olá {customer_name}, ",
        "notification_types": {
            "order_confirmation": True,
            "payment_received": True,
            "payment_expired": True,
            "access_granted": True,
            "daily_summary": False,
            "weekly_report": False,
        },
        "templates": {
            "order_confirmation": "Olá {customer_name}, seu pedido #{order_id} foi confirmado! Valor: R$ {amount}",
            "payment_received": "Olá {customer_name}, recebemos seu pagamento de R$ {amount} para o pedido #{order_id}",
            "payment_expired": "Olá {customer_name}, o pagamento do pedido #{order_id} expirou. Gere um novo link para continuar.",
            "access_granted": "Olá {customer_name}, seu acesso ao produto {product_name} foi liberado!",
            "access_request": "Olá {customer_name}, recebemos sua solicitação de acesso ao produto {product_name}.",
            "access_approved": "Olá {customer_name}, seu acesso ao produto {product_name} foi aprovado até {expires_at}.",
            "access_rejected": "Olá {customer_name}, sua solicitação de acesso foi recusada. Motivo: {reason}",
            "daily_summary": "Resumo diário:\nPedidos: {orders_count}\nVendas: R$ {total_sales}",
            "weekly_report": "Relatório semanal:\nPedidos: {orders_count}\nVendas: R$ {total_sales}\nConversão: {conversion_rate}%",
        },
    },
    "notification_settings": {
        "email_notifications": True,
        "payment_confirmation": True,
        "payment_expiration": True,
        "new_order": True,
        "daily_summary": False,
        "weekly_report": True,
        "send_copy_to": [],
    },
    "integration_settings": {
        "webhook_url": "",
        "api_key": "",
        "notification_url": "",
        "success_url": "",
        "cancel_url": "",
    },
    "checkout_settings": {
        "auto_expire_time": 30,
        "pix_key": "",
        "pix_key_type": "cpf",
    },
}

SECOES = tuple(DEFAULT_SETTINGS.keys())
