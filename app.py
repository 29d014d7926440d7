"""
DreamColor - personalised coloring books made with Gemini.

Features:
- Book sessions: child's name + theme -> cover and line-art pages via Imagen
- Progress polling while the pages are drawn
- PDF download of the finished book
- Idea Helper chat for brainstorming themes
"""
import time

import uvicorn
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Config
from studio.routes import router as book_router
from chat.routes import router as chat_router
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

logger = get_logger("main")

# Validate configuration on startup; generation and chat fail later without a key
try:
    Config.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    logger.error("Please set GEMINI_API_KEY in the environment or .env file")

app = FastAPI(
    title="DreamColor API",
    description="Generate personalised coloring books with Gemini image generation, download them as PDF, and brainstorm themes with the Idea Helper.",
    version="1.0.0"
)


# CORS middleware - added first so it also covers error responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions globally."""
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail}
        )

    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    message, status_code = get_error_response(ErrorCode.UNKNOWN_ERROR)
    return JSONResponse(
        status_code=status_code,
        content={"detail": message}
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every HTTP request with status and timing. Bodies carry images, so they are not logged."""
    start_time = time.time()
    full_url = str(request.url)
    client = request.client.host if request.client else "unknown"

    if Config.LOG_REQUEST_DETAILS:
        logger.info(f"→ {request.method} {full_url} - Client: {client}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"← {request.method} {full_url} - Error: {str(e)} - Time: {process_time:.2f}ms")
        raise

    process_time = (time.time() - start_time) * 1000
    if Config.LOG_REQUEST_DETAILS:
        logger.info(f"← {request.method} {full_url} - Status: {response.status_code} - Time: {process_time:.2f}ms")
    return response


app.include_router(book_router)
logger.info("Book router included")

app.include_router(chat_router)
logger.info("Chat router included")


@app.on_event("startup")
async def startup_event():
    logger.info("=" * 80)
    logger.info("DreamColor starting up")
    logger.info(f"Image model: {Config.IMAGE_MODEL} | Chat model: {Config.CHAT_MODEL}")
    logger.info(f"Host: {Config.HOST}:{Config.PORT}")
    logger.info("=" * 80)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("=" * 80)
    logger.info("DreamColor shutting down")
    logger.info("=" * 80)


@app.get("/healthz")
def health():
    """Health check endpoint."""
    logger.debug("Health check requested")
    return {"status": "ok"}


# Run server directly
if __name__ == "__main__":
    logger.info(f"Starting server on {Config.HOST}:{Config.PORT}")
    uvicorn.run(
        "app:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=True,
        log_level="info"
    )
