"""Word (.docx) to PDF: mammoth turns the document into HTML, headless Chromium prints it."""
import asyncio
import io
import logging
from typing import Awaitable, Callable, Optional

import mammoth
from fastapi.concurrency import run_in_threadpool
from playwright.async_api import async_playwright

from .config import RENDER_TIMEOUT_SECONDS
from .errors import ConversionFailed, MissingInput

logger = logging.getLogger(__name__)

HTML_SHELL = (
    "<html><head><meta charset='utf-8'>"
    "<style>body{{font-family:Arial,Helvetica,sans-serif;margin:40px;}}</style>"
    "</head><body>{body}</body></html>"
)

Renderer = Callable[[str], Awaitable[bytes]]


def docx_to_html(data: bytes) -> str:
    result = mammoth.convert_to_html(io.BytesIO(data))
    for message in result.messages:
        logger.debug("mammoth: %s", message)
    return result.value


def wrap_html(fragment: str) -> str:
    return HTML_SHELL.format(body=fragment)


async def render_html_to_pdf(html: str) -> bytes:
    """Print ``html`` to an A4 PDF in headless Chromium."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(args=["--no-sandbox", "--disable-setuid-sandbox"])
        try:
            page = await browser.new_page()
            await page.set_content(html, wait_until="load")
            return await page.pdf(format="A4", print_background=True)
        finally:
            await browser.close()


async def word_to_pdf(
    data: Optional[bytes],
    render: Optional[Renderer] = None,
    timeout: float = RENDER_TIMEOUT_SECONDS,
) -> bytes:
    """
    Convert a .docx buffer to PDF bytes.

    Single attempt, bounded by ``timeout`` seconds for the render. Any failure
    in either step surfaces as :class:`ConversionFailed`.
    """
    if not data:
        raise MissingInput("Please upload a .docx file.")

    render = render or render_html_to_pdf
    try:
        fragment = await run_in_threadpool(docx_to_html, data)
        return await asyncio.wait_for(render(wrap_html(fragment)), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("Word render timed out after %.1fs", timeout)
        raise ConversionFailed() from e
    except Exception as e:
        logger.exception("Word conversion failed")
        raise ConversionFailed() from e
