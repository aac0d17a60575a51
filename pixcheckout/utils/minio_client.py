# pixcheckout/utils/minio_client.py

import json
from typing import BinaryIO, Optional

from minio import Minio
from slugify import slugify

from pixcheckout.config.settings import (
    MINIO_ENDPOINT,
    MINIO_PUBLIC_ENDPOINT,
    MINIO_ROOT_USER,
    MINIO_ROOT_PASSWORD,
    MINIO_SECURE,
)
from pixcheckout.utils.logger import logger


def criar_cliente_minio() -> Minio:
    """Cria um cliente MinIO com as configurações do ambiente."""
    return Minio(
        endpoint=MINIO_ENDPOINT,
        access_key=MINIO_ROOT_USER,
        secret_key=MINIO_ROOT_PASSWORD,
        secure=MINIO_SECURE,
    )


def verificar_conexao_minio(client=None) -> bool:
    """
    Verifica se o MinIO está acessível.
    Retorna True se conseguir conectar, False caso contrário.
    """
    try:
        (client or get_minio_client()).list_buckets()
        return True
    except Exception as e:
        logger.warning(f"[MinIO] Não foi possível conectar ao MinIO em {MINIO_ENDPOINT}: {e}")
        return False


# Cliente MinIO global (lazy initialization)
client = None


def get_minio_client():
    """Obtém o cliente MinIO, criando se necessário."""
    global client
    if client is None:
        client = criar_cliente_minio()
    return client


def normalizar_nome_bucket(nome: str) -> str:
    """Nome de bucket válido (minúsculo, sem acentos, até 63 caracteres)."""
    return slugify(nome)[:63]


def configurar_permissoes_bucket(bucket_name: str, client=None) -> bool:
    """
    Configura permissões públicas de download para um bucket do MinIO.
    Retorna True se configurado com sucesso, False caso contrário.
    """
    client = client or get_minio_client()
    policy = {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": "*",
                "Action": "s3:GetObject",
                "Resource": f"arn:aws:s3:::{bucket_name}/*",
            }
        ],
    }
    try:
        client.set_bucket_policy(bucket_name, json.dumps(policy))
        logger.info(f"[MinIO] Permissões públicas configuradas para bucket: {bucket_name}")
        return True
    except Exception as e:
        logger.error(f"[MinIO] Erro ao configurar permissões do bucket {bucket_name}: {e}")
        return False


def garantir_bucket(bucket_name: str, client=None):
    client = client or get_minio_client()
    if not client.bucket_exists(bucket_name):
        logger.info(f"[MinIO] Criando bucket: {bucket_name}")
        client.make_bucket(bucket_name)
        configurar_permissoes_bucket(bucket_name, client)


def url_publica(bucket_name: str, object_key: str) -> str:
    return f"{MINIO_PUBLIC_ENDPOINT.rstrip('/')}/{bucket_name}/{object_key}"


def enviar_objeto(
    bucket_name: str,
    object_key: str,
    data: BinaryIO,
    length: int,
    content_type: Optional[str] = None,
    client=None,
) -> str:
    """Envia o objeto ao bucket (criado se necessário) e retorna a URL pública."""
    client = client or get_minio_client()
    garantir_bucket(bucket_name, client)
    try:
        client.put_object(
            bucket_name=bucket_name,
            object_name=object_key,
            data=data,
            length=length,
            content_type=content_type or "application/octet-stream",
        )
    except Exception as e:
        logger.error(f"[MinIO] Erro no upload {bucket_name}/{object_key}: {e}")
        raise
    logger.info(f"[MinIO] Upload concluído: {bucket_name}/{object_key}")
    return url_publica(bucket_name, object_key)


def remover_objeto(bucket_name: str, object_key: str, client=None) -> bool:
    client = client or get_minio_client()
    try:
        if not client.bucket_exists(bucket_name):
            logger.warning(f"[MinIO] Bucket não existe: {bucket_name}")
            return False
        client.remove_object(bucket_name, object_key)
        logger.info(f"[MinIO] Arquivo removido - bucket: {bucket_name}, key: {object_key}")
        return True
    except Exception as e:
        logger.error(f"[MinIO] Erro ao remover {bucket_name}/{object_key}: {e}")
        return False

