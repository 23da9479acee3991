# /app/main.py

# --- Core FastAPI Imports ---
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import uvicorn

# --- Application-specific Imports ---
from .config import get_settings
from .routers import generate_router, export_router
from .services import gemini_service
from .services.dependencies import build_generation_dependencies

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs ONCE at startup: configure the SDK and build the shared collaborators,
    # including the cooldown limiter every request shares.
    settings = get_settings()
    gemini_service.configure(settings.gemini_api_key)
    app.state.generation_deps = build_generation_dependencies(settings)
    if not settings.unsplash_access_key:
        print("WARNING: UNSPLASH_ACCESS_KEY is not set. Responses will use placeholder images only.")
    yield

# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="AI Writing Studio API",
    description="API for generating AI-powered content using Google Gemini.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Malformed bodies are client errors in the {"error": ...} shape the UI expects.
@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    print(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body."}
    )

# --- API Router Inclusion ---
app.include_router(generate_router.router, prefix="/api/generate", tags=["Generate"])
app.include_router(export_router.router, prefix="/api/export", tags=["Export"])

# --- Health Check Endpoints ---
@app.get("/health", tags=["Health Check"])
async def health():
    """Returns the health status of the API."""
    return {"status": "ok"}

@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple banner to confirm the API is online."""
    return {"status": "AI Writing Studio backend is running!", "version": app.version}


def run():
    settings = get_settings()
    print(f"Server running on port {settings.port}")
    print(f"API docs available at http://localhost:{settings.port}/docs")
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
