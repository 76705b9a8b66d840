"""
Armazenamento de imagens: Cloudinary quando configurado, senão disco local
"""
import io
import logging
import mimetypes
import os
import re
import uuid
from typing import List, Optional

import aiofiles
import cloudinary
import cloudinary.uploader
from fastapi import HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from propfind.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
CLOUDINARY_FOLDER = "property-connect"
CLOUDINARY_FORMATS = ["jpg", "jpeg", "png", "gif", "webp"]
LOCAL_URL_PREFIX = "/uploads"


class UploadError(Exception):
    """Falha do serviço de armazenamento (Cloudinary ou disco)"""


def sanitize_filename(filename: str) -> str:
    """Remove componentes de caminho e caracteres inseguros do nome do arquivo"""
    if "\\" in filename:
        raise HTTPException(status_code=400, detail="Nome de arquivo inválido")
    name = os.path.basename(filename)
    name = re.sub(r"[^A-Za-z0-9._-]", "", name)
    name = name.replace("..", "")
    if not name or name.startswith("."):
        raise HTTPException(status_code=400, detail="Nome de arquivo inválido")
    return name


def check_image(content_type: Optional[str], size: int) -> Optional[str]:
    """Retorna o motivo da rejeição, ou None se o arquivo é aceito"""
    if content_type not in ALLOWED_IMAGE_TYPES:
        return "Invalid file type"
    if size > settings.max_file_size_bytes:
        return f"File too large (max {settings.MAX_FILE_SIZE_MB}MB)"
    return None


def _extension(filename: Optional[str], content_type: str) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if re.fullmatch(r"\.[a-z0-9]{1,5}", ext):
        return ext
    return mimetypes.guess_extension(content_type) or ".jpg"


def local_path(filename: str) -> str:
    return os.path.join(settings.UPLOADS_DIR, sanitize_filename(filename))


async def save_local(content: bytes, filename: Optional[str], content_type: str) -> str:
    os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
    unique_name = f"{uuid.uuid4().hex}{_extension(filename, content_type)}"
    dest = os.path.join(settings.UPLOADS_DIR, unique_name)
    try:
        async with aiofiles.open(dest, "wb") as out:
            await out.write(content)
    except OSError as e:
        raise UploadError(f"Falha ao gravar {unique_name}") from e
    return f"{LOCAL_URL_PREFIX}/{unique_name}"


def upload_to_cloudinary(content: bytes) -> str:
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
    )
    try:
        result = cloudinary.uploader.upload(
            io.BytesIO(content),
            folder=CLOUDINARY_FOLDER,
            resource_type="image",
            allowed_formats=CLOUDINARY_FORMATS,
            transformation=[
                {"width": 1200, "height": 1200, "crop": "limit", "quality": "auto"},
            ],
        )
    except Exception as e:
        raise UploadError("Falha no upload para o Cloudinary") from e

    url = result.get("secure_url") if result else None
    if not url:
        raise UploadError("Cloudinary não retornou URL")
    return url


async def store_images(files: List[UploadFile]) -> List[str]:
    """
    Valida e armazena cada arquivo individualmente.

    Arquivos com tipo ou tamanho inválido são ignorados (não é tudo-ou-nada);
    só os aceitos geram URL. O tamanho declarado é verificado antes da
    leitura, para não carregar arquivos grandes em memória. Erro do
    armazenamento levanta UploadError.
    """
    urls: List[str] = []

    for file in files:
        reason = check_image(file.content_type, file.size or 0)
        if not reason:
            content = await file.read()
            reason = check_image(file.content_type, len(content))
        if reason:
            logger.warning(f"Arquivo rejeitado {file.filename!r}: {reason}")
            continue

        if settings.cloudinary_enabled:
            url = await run_in_threadpool(upload_to_cloudinary, content)
        else:
            url = await save_local(content, file.filename, file.content_type)
        urls.append(url)

    return urls
