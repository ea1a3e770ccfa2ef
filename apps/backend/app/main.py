"""FastAPI application exposing IntelliForm operations over PDF uploads."""

from __future__ import annotations

import json
from json import JSONDecodeError
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

from fastapi import BackgroundTasks, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, PlainTextResponse

from intelliform import (
    FieldDefinitionError,
    IntelliFormError,
    InvalidPageError,
    PdfIOError,
    UnsupportedOperationError,
    add_form_fields,
    export_form_data,
    generate_appearance_streams,
    get_form_fields,
    get_form_values,
    get_page_info,
    open_document,
    transform_coordinates,
)

app = FastAPI(title="IntelliForm API", version="0.1.0")
DOCS_PREFIX = "/api"

_STATUS_BY_ERROR: list[tuple[type[IntelliFormError], int]] = [
    (InvalidPageError, 400),
    (FieldDefinitionError, 400),
    (UnsupportedOperationError, 422),
    (PdfIOError, 500),
]


def _http_error(exc: IntelliFormError) -> HTTPException:
    """Translate a library error into an HTTP error carrying its payload."""

    status_code = 400
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break
    return HTTPException(status_code=status_code, detail=exc.as_dict())


def _cleanup_temp_dir(background_tasks: BackgroundTasks, temp_dir: TemporaryDirectory) -> None:
    background_tasks.add_task(temp_dir.cleanup)


def _safe_filename(filename: str | None, default: str) -> str:
    if not filename:
        return default
    candidate = Path(filename).name
    return candidate or default


async def _store_upload(upload: UploadFile, temp_dir: TemporaryDirectory) -> Path:
    """Persist an uploaded PDF inside ``temp_dir`` and return its path."""

    contents = await upload.read()
    if not contents:
        raise HTTPException(status_code=400, detail=f"File '{upload.filename}' is empty.")

    destination = Path(temp_dir.name) / _safe_filename(upload.filename, "document.pdf")
    destination.write_bytes(contents)
    return destination


async def _call(func, *args: Any) -> Any:
    try:
        return await run_in_threadpool(func, *args)
    except IntelliFormError as exc:
        raise _http_error(exc) from exc


def _parse_fields(raw_value: str) -> list[dict[str, Any]]:
    """Parse the JSON encoded field list of a multipart form."""

    try:
        payload = json.loads(raw_value)
    except JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail="fields must be valid JSON.") from exc

    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise HTTPException(status_code=400, detail="fields must be a JSON list of objects.")
    return payload


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok"}


@app.get(
    f"{DOCS_PREFIX}/openapi.json",
    include_in_schema=False,
    name="prefixed_openapi",
)
async def prefixed_openapi() -> JSONResponse:
    return JSONResponse(app.openapi())


@app.get(f"{DOCS_PREFIX}/docs", include_in_schema=False)
async def prefixed_swagger_ui(request: Request) -> HTMLResponse:
    return get_swagger_ui_html(
        openapi_url=str(request.url_for("prefixed_openapi")),
        title=f"{app.title} - Swagger UI",
    )


@app.post("/forms/inspect", response_class=JSONResponse, summary="Describe a PDF")
async def inspect_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="PDF to inspect."),
) -> dict[str, Any]:
    """Return metadata and page geometry of the uploaded PDF."""

    temp_dir = TemporaryDirectory()
    _cleanup_temp_dir(background_tasks, temp_dir)
    input_path = await _store_upload(file, temp_dir)

    document = await _call(open_document, input_path)
    payload = document.as_dict()
    payload["path"] = input_path.name
    return payload


@app.post("/forms/page-info", response_class=JSONResponse, summary="Describe one page")
async def page_info(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="PDF to inspect."),
    page: int = Form(..., description="0-based page index."),
    x: float | None = Form(None, description="Optional x coordinate to map into device space."),
    y: float | None = Form(None, description="Optional y coordinate to map into device space."),
) -> dict[str, Any]:
    """Return the page box and rotation; optionally map a point through it."""

    temp_dir = TemporaryDirectory()
    _cleanup_temp_dir(background_tasks, temp_dir)
    input_path = await _store_upload(file, temp_dir)

    info = await _call(get_page_info, input_path, page)
    payload: dict[str, Any] = {
        "index": info.index,
        "width": info.width,
        "height": info.height,
        "rotation": info.rotation,
    }
    if x is not None and y is not None:
        payload["device_point"] = list(await _call(transform_coordinates, input_path, page, x, y))
    return payload


@app.post("/forms/fields", response_class=JSONResponse, summary="List form fields")
async def list_fields(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="PDF whose form should be read."),
    values_only: bool = Form(False, description="Only return the name to value mapping."),
) -> Any:
    temp_dir = TemporaryDirectory()
    _cleanup_temp_dir(background_tasks, temp_dir)
    input_path = await _store_upload(file, temp_dir)

    if values_only:
        return await _call(get_form_values, input_path)
    fields = await _call(get_form_fields, input_path)
    return [field.as_dict() for field in fields]


@app.post(
    "/forms/add-fields",
    response_class=FileResponse,
    summary="Add form fields",
    response_description="PDF with the requested fields added.",
)
async def add_fields_endpoint(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
    fields: str = Form(..., description="JSON list of field objects."),
) -> FileResponse:
    """Add the described fields and return the rewritten PDF.

    Every field is validated before the document is touched, so an invalid
    payload never yields a partially edited file.
    """

    temp_dir = TemporaryDirectory()
    _cleanup_temp_dir(background_tasks, temp_dir)
    input_path = await _store_upload(file, temp_dir)
    definitions = _parse_fields(fields)

    output_path = Path(temp_dir.name) / f"{input_path.stem}_form.pdf"
    await _call(add_form_fields, input_path, definitions, output_path)

    return FileResponse(output_path, media_type="application/pdf", filename=output_path.name)


@app.post(
    "/forms/appearances",
    response_class=FileResponse,
    summary="Request appearance regeneration",
)
async def appearances_endpoint(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="Source PDF."),
) -> FileResponse:
    temp_dir = TemporaryDirectory()
    _cleanup_temp_dir(background_tasks, temp_dir)
    input_path = await _store_upload(file, temp_dir)

    output_path = Path(temp_dir.name) / f"{input_path.stem}_appearances.pdf"
    await _call(generate_appearance_streams, input_path, output_path)

    return FileResponse(output_path, media_type="application/pdf", filename=output_path.name)


@app.post("/forms/export", summary="Export form data as JSON or CSV")
async def export_endpoint(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(..., description="PDF whose form should be exported."),
    format: str = Form("json", description="Either 'json' or 'csv'."),
) -> PlainTextResponse:
    temp_dir = TemporaryDirectory()
    _cleanup_temp_dir(background_tasks, temp_dir)
    input_path = await _store_upload(file, temp_dir)

    payload = await _call(export_form_data, input_path, format)
    media_type = "text/csv" if format == "csv" else "application/json"
    return PlainTextResponse(payload, media_type=media_type)


__all__ = ["app"]
