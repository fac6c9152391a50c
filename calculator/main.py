import math
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, UploadFile, File, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Environment

from .config import get_settings
from .errors import NegativeNumberError
from .logging_utils import create_logger
from .models import HealthResponse, NegativesResponse, SumRequest, SumResponse
from .parser import add, explain, normalize_newlines, sum_text_bytes
from .rules import TEXT_UPLOAD_SUFFIXES, format_number

logger = create_logger(__name__)

app = FastAPI(
    title="string-calculator",
    description="Sum numbers embedded in a delimited string",
    version="0.1.0",
)

# Result region is focused after each submit so screen readers announce it.
PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>String Calculator</title>
    <style>
        main { padding: 20px; background: #fff; color: #111; min-height: 100vh; }
        form { max-width: 600px; }
        label { display: block; margin-top: 16px; color: #555; font-weight: 600; }
        textarea { margin: 10px 0; color: #222; width: 100%; min-height: 60px; font-size: 16px; }
        button { padding: 10px 24px; background: #006994; color: #fff; border: none;
                 border-radius: 4px; font-size: 16px; cursor: pointer; margin-top: 8px; }
        button:focus { outline: 2px solid #222; }
        .result { color: green; font-weight: 500; outline: none; }
        .error { color: #c00; font-weight: 500; outline: none; }
    </style>
</head>
<body>
<main>
    <h1>String Calculator</h1>

    <form method="post" action="/" aria-labelledby="calculator-title">
        <h2 id="calculator-title">Enter numbers</h2>
        <label for="numbersInput">Numbers (comma, newline, or custom delimiter):</label>
        <textarea id="numbersInput" name="numbers" placeholder="Enter numbers"
                  aria-required="true">{{ numbers }}</textarea>
        <button type="submit" aria-label="Calculate total from numbers input">Calculate</button>
    </form>

    <div aria-live="assertive" aria-atomic="true">
        {% if error is not none %}
        <p id="result" class="error" tabindex="-1">Error: {{ error }}</p>
        {% elif result is not none %}
        <p id="result" class="result" tabindex="-1">Result: {{ result }}</p>
        {% endif %}
    </div>

    <div role="status" aria-live="polite">
        <p>Make sure you enter numbers correctly!</p>
    </div>
</main>
{% if error is not none or result is not none %}
<script>document.getElementById("result").focus();</script>
{% endif %}
</body>
</html>
"""

_page = Environment(autoescape=True).from_string(PAGE_TEMPLATE)


def render_page(numbers: str = "", result=None, error: Optional[str] = None) -> str:
    if result is not None:
        result = format_number(result)
    return _page.render(numbers=numbers, result=result, error=error)


def fits_json(values) -> bool:
    """False if a value cannot be written as a JSON number (inf, or an int past
    the interpreter's int/str digit limit)."""
    digits = sys.get_int_max_str_digits() if hasattr(sys, "get_int_max_str_digits") else 0
    bound = 10 ** digits if digits else None
    for value in values:
        if isinstance(value, float) and not math.isfinite(value):
            return False
        if bound is not None and isinstance(value, int) and abs(value) >= bound:
            return False
    return True


def _checked(report):
    if not fits_json([report["total"], *report["values"]]):
        raise HTTPException(status_code=413, detail="Numbers too large to encode as JSON")
    return {"total": report["total"], "report": report}


@app.exception_handler(NegativeNumberError)
async def negative_number_handler(request: Request, exc: NegativeNumberError):
    logger.info("rejected %s: %s", request.url.path, exc.message)
    negatives = exc.negatives if fits_json(exc.negatives) else []
    body = NegativesResponse(detail=exc.message, negatives=negatives)
    return JSONResponse(status_code=422, content=body.model_dump())


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/", response_class=HTMLResponse)
def index():
    return HTMLResponse(content=render_page())


@app.post("/", response_class=HTMLResponse)
def calculate(numbers: str = Form("")):
    # Browsers submit textarea line breaks as CRLF.
    text = normalize_newlines(numbers)
    try:
        result = add(text)
    except NegativeNumberError as e:
        logger.info("rejected form input: %s", e.message)
        return HTMLResponse(content=render_page(numbers=numbers, error=e.message))
    return HTMLResponse(content=render_page(numbers=numbers, result=result))


@app.post("/sum", response_model=SumResponse, responses={422: {"model": NegativesResponse}})
def sum_numbers(payload: SumRequest):
    return _checked(explain(payload.numbers))


@app.post("/sum/file", response_model=SumResponse, responses={422: {"model": NegativesResponse}})
async def sum_file(file: UploadFile = File(...)):
    if not file.filename or not file.filename.lower().endswith(TEXT_UPLOAD_SUFFIXES):
        raise HTTPException(status_code=422, detail="Only text files are supported")

    limit = get_settings().max_upload_bytes
    raw = await file.read()
    if len(raw) > limit:
        raise HTTPException(status_code=413, detail=f"File exceeds {limit} bytes")

    return _checked(sum_text_bytes(raw)["report"])


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
