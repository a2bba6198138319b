# pdfdesk/main.py
import logging
from typing import Awaitable, List, NamedTuple, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from . import word
from .accounts import AccountService, get_account_service
from .config import (
    COOKIE_NAME,
    COOKIE_SECURE,
    LOG_LEVEL,
    MAX_IMAGE_FILES,
    MAX_MERGE_FILES,
    MAX_UPLOAD_MB,
    SESSION_MAX_AGE_SECONDS,
    TEMPLATES_DIR,
)
from .documents import images_to_pdf, merge_pdfs, split_pdf
from .errors import AuthenticationRequired, PdfDeskError
from .sessions import attach_user, current_user, require_user, session_gate
from .uploads import output_filename, read_upload, read_uploads


logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


# ----------------------------
# App
# ----------------------------
app = FastAPI(title="PDF Desk")
app.middleware("http")(attach_user)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


class Tool(NamedTuple):
    template: str
    title: str
    operation: str


MERGE = Tool("pdf/merge.html", "Merge PDFs", "merged")
SPLIT = Tool("pdf/split.html", "Split PDF", "split")
IMAGES = Tool("pdf/images_to_pdf.html", "Images to PDF", "images")
WORD = Tool("pdf/word_to_pdf.html", "Word → PDF", "word")


def render(request: Request, template: str, title: str, status_code: int = 200, **context):
    context.update(title=title, user=current_user(request))
    return templates.TemplateResponse(request, template, context, status_code=status_code)


@app.exception_handler(AuthenticationRequired)
async def redirect_to_login(request: Request, exc: AuthenticationRequired):
    return RedirectResponse(exc.login_url, status_code=302)


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return render(request, "error.html", "Error", status_code=500, error="Something went wrong. Please try again.")


# ----------------------------
# Health
# ----------------------------
@app.get("/health")
def health():
    return {"ok": True, "max_upload_mb": MAX_UPLOAD_MB}


@app.get("/")
def home():
    return RedirectResponse("/dashboard", status_code=302)


# ----------------------------
# Auth
# ----------------------------
def _login_response(email: str, name: str) -> RedirectResponse:
    token = session_gate.issue_token(email, name)
    res = RedirectResponse("/dashboard", status_code=302)
    res.set_cookie(
        COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        secure=COOKIE_SECURE,
        max_age=SESSION_MAX_AGE_SECONDS,
        path="/",
    )
    return res


@app.get("/signup")
def signup_page(request: Request):
    if current_user(request):
        return RedirectResponse("/dashboard", status_code=302)
    return render(request, "auth/signup.html", "Sign Up")


@app.post("/signup")
def signup(
    request: Request,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    accounts: AccountService = Depends(get_account_service),
):
    try:
        user = accounts.register(name, email, password)
    except PdfDeskError as e:
        return render(
            request, "auth/signup.html", "Sign Up", status_code=e.status_code,
            error=e.message, name=name or "", email=email or "",
        )
    return _login_response(user.email, user.name)


@app.get("/login")
def login_page(request: Request):
    if current_user(request):
        return RedirectResponse("/dashboard", status_code=302)
    return render(request, "auth/login.html", "Login")


@app.post("/login")
def login(
    request: Request,
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    accounts: AccountService = Depends(get_account_service),
):
    try:
        user = accounts.authenticate(email, password)
    except PdfDeskError as e:
        return render(
            request, "auth/login.html", "Login", status_code=e.status_code,
            error=e.message, email=email or "",
        )
    return _login_response(user.email, user.name)


@app.post("/logout")
def logout():
    res = RedirectResponse("/login", status_code=302)
    res.delete_cookie(COOKIE_NAME, path="/")
    return res


@app.get("/me")
def me(request: Request):
    user = current_user(request)
    return JSONResponse({
        "logged_in": bool(user),
        "email": user["email"] if user else None,
        "name": user["name"] if user else None,
    })


@app.get("/dashboard")
def dashboard(request: Request, user: dict = Depends(require_user)):
    return render(request, "dashboard.html", "Dashboard")


# ----------------------------
# PDF tools
# ----------------------------
async def run_tool(request: Request, tool: Tool, job: Awaitable[bytes], **form) -> Response:
    """Await ``job`` and send its PDF, or re-render the tool's form with the error."""
    try:
        pdf = await job
    except HTTPException:
        raise
    except PdfDeskError as e:
        logger.info("%s rejected: %s", tool.operation, e.message)
        return render(request, tool.template, tool.title, status_code=e.status_code, error=e.message, **form)
    except Exception:
        logger.exception("%s failed unexpectedly", tool.operation)
        return render(
            request, tool.template, tool.title, status_code=500,
            error="Something went wrong while processing your files.", **form,
        )

    filename = output_filename(tool.operation)
    logger.info("%s produced %s (%d bytes)", tool.operation, filename, len(pdf))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/pdf/merge")
def merge_page(request: Request, user: dict = Depends(require_user)):
    return render(request, MERGE.template, MERGE.title)


@app.post("/pdf/merge")
async def merge_submit(
    request: Request,
    pdfs: Optional[List[UploadFile]] = File(None),
    user: dict = Depends(require_user),
):
    async def job():
        buffers = await read_uploads(pdfs, MAX_MERGE_FILES)
        return await run_in_threadpool(merge_pdfs, buffers)

    return await run_tool(request, MERGE, job())


@app.get("/pdf/split")
def split_page(request: Request, user: dict = Depends(require_user)):
    return render(request, SPLIT.template, SPLIT.title)


@app.post("/pdf/split")
async def split_submit(
    request: Request,
    pdf: Optional[UploadFile] = File(None),
    ranges: Optional[str] = Form(None),
    user: dict = Depends(require_user),
):
    data = await read_upload(pdf)
    return await run_tool(request, SPLIT, run_in_threadpool(split_pdf, data, ranges), ranges=ranges or "")


@app.get("/pdf/images-to-pdf")
def images_page(request: Request, user: dict = Depends(require_user)):
    return render(request, IMAGES.template, IMAGES.title)


@app.post("/pdf/images-to-pdf")
async def images_submit(
    request: Request,
    images: Optional[List[UploadFile]] = File(None),
    user: dict = Depends(require_user),
):
    async def job():
        buffers = await read_uploads(images, MAX_IMAGE_FILES)
        return await run_in_threadpool(images_to_pdf, buffers)

    return await run_tool(request, IMAGES, job())


@app.get("/pdf/word-to-pdf")
def word_page(request: Request, user: dict = Depends(require_user)):
    return render(request, WORD.template, WORD.title)


@app.post("/pdf/word-to-pdf")
async def word_submit(
    request: Request,
    doc: Optional[UploadFile] = File(None),
    user: dict = Depends(require_user),
):
    data = await read_upload(doc)
    return await run_tool(request, WORD, word.word_to_pdf(data))


if __name__ == "__main__":
    import os

    import uvicorn

    port = int(os.environ.get("PORT", "3000"))
    uvicorn.run("pdfdesk.main:app", host="127.0.0.1", port=port, reload=False)
