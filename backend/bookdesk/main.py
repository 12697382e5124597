import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import Base, engine, SessionLocal
from .errors import LibraryError
from . import models  # noqa: F401  registers tables on Base.metadata
from .auth import seed_admin

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


# Create DB schema and seed the admin account on startup
@app.on_event("startup")
def init_db():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()


# Register routers
from .routes import auth as auth_routes  # noqa
from .routes import books as books_routes  # noqa
from .routes import loans as loans_routes  # noqa

app.include_router(auth_routes.router, prefix="/api/auth", tags=["auth"])
app.include_router(books_routes.router, prefix="/api/books", tags=["books"])
app.include_router(loans_routes.router, tags=["loans"])


@app.get("/")
def root():
    return {"message": f"{settings.app_name} backend is running."}
