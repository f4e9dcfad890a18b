from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from exam_portal.core.config import settings
from exam_portal.core.exceptions import ExamPortalError
from exam_portal.core.logging import configure_logging
from exam_portal.endpoints import exam, attempt, evaluation, certificate
from exam_portal.middleware.exceptions import (
    exam_portal_exception_handler,
    global_exception_handler,
    validation_exception_handler,
)
from exam_portal.middleware.logging import RequestLoggingMiddleware

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(ExamPortalError, exam_portal_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(exam.router, prefix="/exams", tags=["Exams"])
app.include_router(attempt.router, prefix="/attempts", tags=["Exam Attempts"])
app.include_router(evaluation.router, prefix="/evaluations", tags=["Evaluations"])
app.include_router(certificate.router, prefix="/certificates", tags=["Certificates"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
