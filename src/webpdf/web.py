"""
webpdf Web API - HTTP access to webpage conversion.

A small FastAPI application that converts a URL to PDF and returns it
either as a download or as base64 inside JSON.
"""

import base64
import io
import logging
from typing import Optional
from urllib.parse import urlparse

from fastapi import FastAPI, Form, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, HttpUrl

from . import __version__
from .errors import ExtractionError, WebPDFError
from .extractor import ContentExtractor
from .models import ExtractedPage
from .naming import name_for
from .renderer import PDFRenderer


logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="webpdf",
    description="Convert a webpage into a paginated PDF",
    version=__version__,
)


class ConversionRequest(BaseModel):
    """Request model for webpage conversion."""

    url: HttpUrl


def normalize_url(url: str) -> str:
    """Add a scheme when missing and reject anything but http(s)."""
    url = url.strip()
    parsed = urlparse(url)
    if not parsed.scheme:
        url = f"https://{url}"
        parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise HTTPException(status_code=422, detail=f"Invalid URL: {url}")
    return url


def convert_url(url: str) -> tuple[ExtractedPage, bytes, int]:
    """Extract and render a URL; returns the page, PDF bytes and page count."""
    with ContentExtractor() as extractor:
        page = extractor.extract(url)

    renderer = PDFRenderer()
    pdf_bytes = renderer.render_page(page, output=None)
    return page, pdf_bytes, renderer.last_result.page_count


@app.post("/convert")
async def convert_page(url: str = Form(...)):
    """
    Convert a webpage URL to PDF and return it for download.
    """
    url = normalize_url(url)
    try:
        page, pdf_bytes, _ = convert_url(url)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except WebPDFError as e:
        logger.error("Conversion of %s failed: %s", url, e)
        raise HTTPException(status_code=500, detail=str(e))

    filename = name_for(page.title, existing=())

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(pdf_bytes)),
        },
    )


@app.post("/api/convert", response_class=JSONResponse)
async def api_convert(request: ConversionRequest):
    """
    API endpoint for webpage conversion.

    Returns JSON with PDF bytes encoded as base64.
    """
    try:
        page, pdf_bytes, page_count = convert_url(str(request.url))
    except WebPDFError as e:
        status = 502 if isinstance(e, ExtractionError) else 500
        return JSONResponse(
            status_code=status,
            content={"success": False, "error": str(e)},
        )

    metadata: dict[str, Optional[str]] = {
        "author": page.metadata.author,
        "site_name": page.metadata.site_name,
        "excerpt": page.metadata.excerpt,
    }
    return {
        "success": True,
        "title": page.title,
        "metadata": metadata,
        "word_count": page.word_count,
        "reading_time": page.reading_time_minutes,
        "page_count": page_count,
        "filename": name_for(page.title, existing=()),
        "pdf_base64": base64.b64encode(pdf_bytes).decode("ascii"),
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
