"""FastAPI 애플리케이션 진입점."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from moodbite.api import feedback, recommendations
from moodbite.core.config import get_settings
from moodbite.core.logger import get_logger
from moodbite.core.logging_config import configure_logging

configure_logging()
logger = get_logger(__name__)
settings = get_settings()

app = FastAPI(title="Moodbite Recommendation API")

app.include_router(recommendations.router)
app.include_router(feedback.router)


def _cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
        "Access-Control-Allow-Headers": settings.CORS_ALLOW_HEADERS,
        "Access-Control-Allow-Methods": settings.CORS_ALLOW_METHODS,
    }


@app.middleware("http")
async def add_cors_headers(request: Request, call_next) -> Response:
    """모든 응답에 허용 범위가 넓은 CORS 헤더를 붙입니다."""
    response = await call_next(request)
    for name, value in _cors_headers().items():
        response.headers.setdefault(name, value)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP 예외를 `{"error": ...}` 형식으로 변환합니다."""
    if exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """파싱할 수 없거나 타입이 맞지 않는 요청 본문을 400으로 처리합니다."""
    logger.info("Invalid request body on %s %s: %s", request.method, request.url.path, exc.errors()[:3])
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상하지 못한 예외를 표준 형식으로 처리합니다.

    ServerErrorMiddleware에서 만들어지는 응답이라 CORS 미들웨어를 거치지 않으므로 헤더를 직접 붙인다.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"}, headers=_cors_headers())


@app.get("/")
def health_check() -> dict:
    """헬스 체크 엔드포인트."""
    return {"status": "ok", "message": "Moodbite recommendation server is running"}
