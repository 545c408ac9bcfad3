"""FastAPI transport: upload a RAML document, download Swagger 2.0 JSON.

Needs the ``server`` extra (``pip install .[server]``).
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Annotated

from fastapi import FastAPI, File, Form, HTTPException, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict

from raml_oas_converter import __version__
from raml_oas_converter.converter.core import UploadRequest, convert_document_bytes
from raml_oas_converter.errors import ConverterError

logger = logging.getLogger(__name__)

APP_REF = "raml_oas_converter.converter.http_server:app"
FLAGS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "": False,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


class StatusResponse(BaseModel):
    """Liveness/readiness payload."""

    model_config = ConfigDict(extra="forbid")

    status: str


def _parse_flag(value: str | None) -> bool:
    if value is None:
        return False
    flag = FLAGS.get(value.strip().lower())
    if flag is None:
        raise ValueError("validate must be a boolean flag (true/false)")
    return flag


def create_app() -> FastAPI:
    """Build the upload application."""
    app = FastAPI(
        title="RAML to OAS2 Converter",
        version=__version__,
        description="Upload RAML documents and download Swagger 2.0 JSON.",
    )

    @app.get("/healthz", response_model=StatusResponse)
    async def healthz() -> StatusResponse:
        return StatusResponse(status="ok")

    @app.get("/readyz", response_model=StatusResponse)
    async def readyz() -> StatusResponse:
        return StatusResponse(status="ready")

    @app.post("/v1/convert/upload")
    async def convert_upload(
        document: Annotated[UploadFile, File()],
        expected_sha256: Annotated[str | None, Form()] = None,
        validate: Annotated[str | None, Form()] = None,
    ) -> Response:
        """Convert the uploaded RAML document."""
        payload = await document.read()
        if not payload:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "uploaded document is empty")
        try:
            request = UploadRequest(
                filename=document.filename or "",
                expected_sha256=expected_sha256,
                validate=_parse_flag(validate),
            )
            input_sha, outcome = await convert_document_bytes(payload, request)
        except (ValueError, ConverterError) as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        except Exception as exc:
            logger.exception("unexpected error during HTTP conversion upload")
            raise HTTPException(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error"
            ) from exc

        return Response(
            content=outcome.output_bytes,
            media_type="application/json",
            headers={
                "X-Input-SHA256": input_sha,
                "X-Output-SHA256": outcome.output_sha256,
                "X-Output-Filename": outcome.output_filename,
            },
        )

    return app


app = create_app()


def main(argv: list[str] | None = None) -> None:
    """``raml-oas-http`` entrypoint."""
    try:
        import uvicorn
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "uvicorn is required to run raml-oas-http. Install with extra: .[server]"
        ) from exc
    parser = argparse.ArgumentParser(description="RAML to OAS2 converter HTTP server.")
    parser.add_argument("--host", default=os.getenv("CONVERTER_HTTP_HOST", "0.0.0.0"))
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("CONVERTER_HTTP_PORT", "8090"))
    )
    args = parser.parse_args(argv)
    uvicorn.run(APP_REF, host=args.host, port=args.port, reload=False)


if __name__ == "__main__":
    main()
