import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime

from . import __version__
from .config import settings
from .api.routes import router
from .api.middleware import setup_middleware
from .core.errors import DiagnosticError
from .core.questions import QUESTIONS, validate_question_table

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"🚀 Starting {settings.DIAGNOSTIC_TITLE}...")

    try:
        validate_question_table(QUESTIONS)
        logger.info(f"✅ Question table validated: {len(QUESTIONS)} questions")

        if settings.assistant_configured:
            logger.info(f"AI assistant enabled with model {settings.ASSISTANT_MODEL}")
        else:
            logger.warning("No API_KEY - AI assistant requests will return a configuration error")

        logger.info("🎯 Diagnostic service ready!")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    yield

    # Shutdown
    logger.info("👋 Shutting down...")

# Create FastAPI app
app = FastAPI(
    title=settings.DIAGNOSTIC_TITLE,
    description="Operational bottleneck diagnostic with an AI assistant to explain results",
    version=__version__,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)

# Include routes
app.include_router(router, prefix="/api", tags=["Diagnostic"])

@app.get("/", response_class=HTMLResponse)
async def root():
    return HTMLResponse(content=f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>{settings.DIAGNOSTIC_TITLE}</title>
        <style>
            body {{ font-family: Georgia, serif; max-width: 800px; margin: 0 auto; padding: 20px; }}
            .header {{ background: #0f172a; color: white; padding: 20px; border-radius: 10px; }}
            .section {{ margin: 20px 0; padding: 15px; border: 1px solid #ddd; border-radius: 5px; }}
            .endpoint {{ background: #f8f9fa; padding: 10px; margin: 5px 0; border-radius: 3px; }}
            a {{ color: #b08d57; text-decoration: none; }}
            a:hover {{ text-decoration: underline; }}
        </style>
    </head>
    <body>
        <div class="header">
            <h1>{settings.BRAND_NAME}: {settings.DIAGNOSTIC_TITLE}</h1>
            <p>Is your department performance bottlenecked?</p>
        </div>

        <div class="section">
            <h2>API Endpoints</h2>
            <div class="endpoint"><strong>GET</strong> /api/questions - Diagnostic questions</div>
            <div class="endpoint"><strong>POST</strong> /api/diagnostic/score - Score answers</div>
            <div class="endpoint"><strong>GET</strong> /api/results/{{category}} - Result description</div>
            <div class="endpoint"><strong>POST</strong> /api/assistant - Chat with the AI assistant</div>
            <div class="endpoint"><strong>GET</strong> /api/booking - Book a strategy call</div>
        </div>

        <div class="section">
            <h2>Documentation</h2>
            <p><a href="/docs" target="_blank">Interactive API Documentation</a></p>
            <p><a href="/api/health">Health Check</a></p>
        </div>

        <footer style="text-align: center; margin-top: 40px; color: #666;">
            <p>Results are for informational purposes only. No professional advice guaranteed.</p>
        </footer>
    </body>
    </html>
    """)

@app.exception_handler(DiagnosticError)
async def diagnostic_exception_handler(request: Request, exc: DiagnosticError):
    headers = {"Allow": "POST"} if exc.status_code == 405 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(f"Invalid request on {request.url.path}: {errors}")
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"{location}: {message}" if location else message}
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "timestamp": datetime.now().isoformat()
        }
    )
