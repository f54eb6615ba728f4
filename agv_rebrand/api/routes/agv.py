from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Generator

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from agv_rebrand.config import settings
from agv_rebrand.errors import InputValidationError
from agv_rebrand.ocr.recognizer import TextRecognizer, create_default_recognizer
from agv_rebrand.pipeline.orchestrator import run_rebrand_pipeline
from agv_rebrand.schemas import AgvProcFields, AgvProcResponse, AgvProcUrls
from agv_rebrand.storage.local import public_url
from agv_rebrand.upstream.agv_client import AgvClient, SourceImageFetcher


logger = logging.getLogger(__name__)

router = APIRouter(tags=["agv"])

_DNI_PATTERN = re.compile(r"[0-9]{6,}")


def get_fetcher() -> Generator[SourceImageFetcher, None, None]:
    client = AgvClient()
    try:
        yield client
    finally:
        client.close()


def get_recognizer() -> TextRecognizer:
    return create_default_recognizer()


def validate_dni(raw: str | None) -> str:
    dni = (raw or "").strip()
    if not _DNI_PATTERN.fullmatch(dni):
        raise InputValidationError("Parámetro dni inválido. Ej: ?dni=10001088")
    return dni


@router.get("/agv-proc", response_model=AgvProcResponse)
def process_agv(
    request: Request,
    dni: str = Query(default=""),
    fetcher: SourceImageFetcher = Depends(get_fetcher),
    recognizer: TextRecognizer = Depends(get_recognizer),
) -> AgvProcResponse:
    try:
        dni = validate_dni(dni)
    except InputValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        summary = run_rebrand_pipeline(dni, fetcher=fetcher, recognizer=recognizer)
    except Exception as exc:  # noqa: BLE001 - endpoint boundary
        logger.exception("agv-proc failed for dni=%s", dni)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error procesando imagen: {exc}",
        ) from exc

    now_ms = int(time.time() * 1000)
    return AgvProcResponse(
        bot=settings.bot_identifier,
        chat_id=now_ms,
        date=datetime.now(timezone.utc).isoformat(),
        fields=AgvProcFields(dni=dni),
        from_id=now_ms,
        message=summary.ocr_text or f"Imagen procesada para DNI {dni}",
        parts_received=1,
        urls=AgvProcUrls(FILE=public_url(str(request.base_url), summary.filename)),
    )
