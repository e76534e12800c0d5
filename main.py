import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.encoders import jsonable_encoder

from app.core.config import settings
from app.core.exceptions import QuizServiceException
from app.core.logging_config import configure_logging
from app.models import all_models  # noqa: F401
from app.routes.meeting.meeting_routers import meeting_router
from app.routes.quiz.attempt_routers import attempt_router
from app.routes.quiz.quiz_routers import quiz_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Brevet Quiz API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(meeting_router)
app.include_router(quiz_router)
app.include_router(attempt_router)


@app.exception_handler(QuizServiceException)
async def quiz_service_exception_handler(request: Request, exc: QuizServiceException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "invalid request",
            "error": "ValidationError",
            "details": {"validation_errors": jsonable_encoder(exc.errors())},
        },
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>Brevet Quiz API</title>
        </head>
        <body>
            <h1>Brevet Quiz API</h1>
            <p>See the API documentation <a href="/docs">here</a>.</p>
        </body>
    </html>
    """
