# -*- coding: utf-8 -*-
"""
FastAPI-Einstiegspunkt des Belegspeichers.

Clients laden JPEG-Belege pro Benutzer über ``POST /upload`` hoch und holen sie
über ``GET /receipts?userid=...&filename=...&scale=...`` skaliert wieder ab.
Jeder Fehler endet in einem Fehlercode als Klartext, erzeugt von ``generate_error``.
"""

import asyncio
import logging
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

from receipt_store.config import configure_logging, settings
from receipt_store.errors import (
    CANT_PARSE_FORM,
    FILE_TOO_BIG,
    INVALID_FILE,
    ReceiptError,
    generate_error,
)
from receipt_store.services.receipt_download_service import load_resized_receipt
from receipt_store.services.receipt_upload_service import process_receipt_upload
from receipt_store.services.request_validation import (
    check_upload_size,
    parse_file_name,
    parse_scale,
    parse_user_id,
    require_user_id,
)
from receipt_store.upload_page import UPLOAD_FORM_HTML

configure_logging()
logger = logging.getLogger(__name__)

# Die FastAPI-App, die von uvicorn ausgeführt wird.
app = FastAPI(title="Receipt Store")


@app.middleware("http")
async def log_request(request: Request, call_next):
    """Schreibt ``<client> <method> <url>`` für jede eingehende Anfrage ins Log."""
    client = f"{request.client.host}:{request.client.port}" if request.client else "-"
    logger.info("%s %s %s", client, request.method, request.url)
    return await call_next(request)


@app.exception_handler(ReceiptError)
async def receipt_error_handler(request: Request, exc: ReceiptError) -> PlainTextResponse:
    return generate_error(exc.code, exc.status_code)


def _check_declared_length(request: Request) -> None:
    """Lehnt zu große Bodies schon anhand von Content-Length ab, bevor geparst wird."""
    length = request.headers.get("content-length")
    if length is None:
        return
    try:
        declared = int(length)
    except ValueError as exc:
        raise ReceiptError(CANT_PARSE_FORM, 500) from exc
    if declared > settings.MAX_BODY_SIZE:
        raise ReceiptError(FILE_TOO_BIG, 400)


async def _capped_stream(request: Request, limit: int) -> AsyncIterator[bytes]:
    """
    Reicht den Request-Body stückweise weiter und bricht ab, sobald mehr als
    ``limit`` Bytes angekommen sind.

    Greift auch bei chunked Uploads ohne Content-Length.
    """
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            logger.warning("Request body exceeds %d bytes, aborting upload", limit)
            raise ReceiptError(FILE_TOO_BIG, 400)
        yield chunk


async def _parse_upload_form(request: Request) -> FormData:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        logger.warning("Could not parse multipart form: content type %r", content_type)
        raise ReceiptError(CANT_PARSE_FORM, 500)
    parser = MultiPartParser(
        request.headers,
        _capped_stream(request, settings.MAX_BODY_SIZE),
        max_part_size=settings.MAX_UPLOAD_SIZE,
    )
    try:
        return await parser.parse()
    except (MultiPartException, KeyError, ValueError) as exc:
        logger.warning("Could not parse multipart form: %s", exc)
        raise ReceiptError(CANT_PARSE_FORM, 500) from exc


@app.get("/upload", response_class=HTMLResponse)
async def upload_form() -> HTMLResponse:
    """Liefert das statische Upload-Formular aus."""
    return HTMLResponse(UPLOAD_FORM_HTML)


@app.post("/upload")
async def api_upload(request: Request) -> PlainTextResponse:
    """
    Speichert einen hochgeladenen JPEG-Beleg und antwortet mit der erzeugten Datei-ID.

    Der Body ist ein Multipart-Formular mit dem Textfeld ``userID`` und der Datei
    ``uploadFile``. Die zurückgegebene ID (ohne Endung) braucht der Client später
    zum Herunterladen.
    """
    _check_declared_length(request)
    form = await _parse_upload_form(request)
    try:
        user_id = form.get("userID")
        user_id = require_user_id(user_id if isinstance(user_id, str) else None)

        upload = form.get("uploadFile")
        if not isinstance(upload, UploadFile):
            raise ReceiptError(INVALID_FILE, 400)
        check_upload_size(upload.size, settings.MAX_UPLOAD_SIZE)
        try:
            content = await upload.read()
        except (OSError, ValueError) as exc:
            raise ReceiptError(INVALID_FILE, 400) from exc

        # Dateisystem-Zugriffe blockieren, daher in einem Worker-Thread ausführen.
        result = await asyncio.to_thread(
            process_receipt_upload,
            user_id,
            content,
            settings.UPLOAD_PATH,
            settings.MAX_UPLOAD_SIZE,
        )
    finally:
        await form.close()
    return PlainTextResponse(result["file_id"])


@app.get("/receipts")
@app.get("/receipts/{receipt_path:path}")
async def api_download(request: Request) -> Response:
    """
    Gibt einen gespeicherten Beleg als JPEG zurück, skaliert um ``scale``.

    Alle drei Query-Parameter werden geprüft, bevor das Dateisystem angefasst wird.
    """
    query = {key: request.query_params.getlist(key) for key in request.query_params.keys()}
    scale = parse_scale(query)
    user_id = parse_user_id(query)
    file_name = parse_file_name(query)

    image_bytes = await asyncio.to_thread(
        load_resized_receipt, settings.UPLOAD_PATH, user_id, file_name, scale
    )
    return Response(content=image_bytes, media_type="image/jpeg")


def run() -> None:
    logger.info(
        "Server started on %s:%s, use /upload for uploading receipts and "
        "/receipts?userid=<userID>&filename=<fileID>.jpg&scale=<scale> for downloading",
        settings.HOST,
        settings.PORT,
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


# Direkter Start via `python -m receipt_store.main`, sonst über `uvicorn receipt_store.main:app`.
if __name__ == "__main__":
    run()
