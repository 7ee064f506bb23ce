# backend/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

# Settings are validated on import: a missing signing key or mail credential stops the process here
from config import settings
from database import init_db
from utils.logger import configure_logging, get_logger

# Router imports
from routes.auth import router as auth_router
from routes.register import router as register_router
from routes.categories import router as categories_router
from routes.products import router as products_router
from routes.reviews import router as reviews_router
from routes.orders import router as orders_router
from routes.users import router as users_router
from routes.logs import router as logs_router

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    app.state.logger.info("Catalog API started")
    yield


app = FastAPI(title="Catalog Store API", version="1.0.0", lifespan=lifespan)
app.state.logger = get_logger()

# CORS Configuration
origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def first_error_message(exc: RequestValidationError) -> str:
    """Describe the first violated constraint as '"<field path>": <reason>'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    err = errors[0]
    loc = [str(part) for part in err.get("loc", ()) if part != "body"]
    if not loc:
        return err.get("msg", "Invalid request body.")
    return f"\"{'.'.join(loc)}\": {err.get('msg')}"


# Malformed input is a client error reported with the first offending field
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = first_error_message(exc)
    request.app.state.logger.info("Validation failed %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


# Anything unexpected is logged and answered without internal detail
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request.app.state.logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error."},
    )


# Router registration
app.include_router(auth_router)
app.include_router(register_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(reviews_router)
app.include_router(orders_router)
app.include_router(users_router)
app.include_router(logs_router)


@app.get("/")
def read_root():
    return {"message": "Catalog Store API is running"}


if __name__ == "__main__":
    import os
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
