import os
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse

from propfind.core.config import settings
from propfind.core.dependencies import get_current_user
from propfind.core.rate_limit import WRITE_LIMIT, limiter
from propfind.models import user_model
from propfind.services import storage_service

router = APIRouter(tags=["Imagens"])


@router.post("/api/upload")
@limiter.limit(WRITE_LIMIT)
async def upload_images(
    request: Request,
    images: List[UploadFile] = File(...),
    _: user_model.User = Depends(get_current_user),
):
    """
    Recebe até MAX_FILES_PER_UPLOAD imagens. Arquivos com tipo ou tamanho
    inválido são descartados individualmente.
    """
    if len(images) > settings.MAX_FILES_PER_UPLOAD:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files (max {settings.MAX_FILES_PER_UPLOAD})",
        )
    urls = await storage_service.store_images(images)
    return {"urls": urls}


# Servir imagens gravadas em disco (quando o Cloudinary não está configurado)
@router.get("/uploads/{filename}")
def serve_upload(filename: str):
    path = storage_service.local_path(filename)
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(path=path)
