# api/main.py
import logging
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from core.config import CORS_ORIGINS, LOG_LEVEL
from core.exceptions import (
    LendingError, ValidationError, InvalidTransition, ConflictError,
    AuthenticationError, NotAuthorized, NotFound, IdExhaustion
)
from core.sa.database import db
from api.routes import auth, users, books, reviews

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Book Lending API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Most specific classes first
ERROR_STATUS = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (NotAuthorized, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (IdExhaustion, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidTransition, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_400_BAD_REQUEST),
]

def status_for(exc: LendingError) -> int:
    for error_class, status_code in ERROR_STATUS:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST

@app.exception_handler(LendingError)
async def lending_error_handler(request: Request, exc: LendingError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.exception(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return JSONResponse(status_code=status_code, content={"detail": "Internal server error"})
    return JSONResponse(status_code=status_code, content={"detail": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())}
    )

@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )

# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    db.init_db()

@app.get("/")
async def root():
    return {"message": "Book lending API is running"}

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(reviews.router)
app.include_router(books.router)

# Main execution
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["api", "core"]
    )
