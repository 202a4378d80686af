# app/main.py
from dotenv import load_dotenv

load_dotenv()

import logging.config
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.appconfig import settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

# Import routers
from app.alert_engine.routes import router as alert_router
from app.database.connection import init_models
from app.note_engine.routes import router as note_router
from app.shared.exceptions import ClinicalError, Unauthorized
from app.system_services.system_routes import router as system_router
from app.users.auth_routers import router as auth_router
from app.visionsystem.routes import router as vision_router
from app.voice.routes import router as voice_router

# Import configurations
from config.config_routes import router as config_router
from config.llmconfig import llm_settings
from config.reset_config_route import router as reset_config_route
from config.visionconfig import vision_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    await init_models()
    print("\n")
    print("\n===============================================================================")
    print("===============================================================================")
    print(f" 🚀 Starting {settings.APP_NAME}")
    print(f" ✅ LLM Provider: {llm_settings.LLM_PROVIDER} - {llm_settings.current_llm_model}")
    print(f" ✅ LLM Temperature: {llm_settings.LLM_TEMPERATURE}")
    print(f" ✅ Chat History Limit: {llm_settings.CHAT_HISTORY_LIMIT}")
    print(
        f" ✅ Vision Model: {vision_settings.VISION_MODEL_PROVIDER} - {vision_settings.current_vision_model}"
    )
    print(f" ✅ Speech: {llm_settings.STT_MODEL} / {llm_settings.TTS_MODEL} ({llm_settings.TTS_VOICE})")
    print(f" ✅ Database: {settings.DATABASE_URL.split('://')[0]}")
    print(f" ✅ Timezone: {settings.TIMEZONE}")
    print("===============================================================================")
    print("===============================================================================\n")
    yield
    # Shutdown
    print("👋 Shutting down")


app = FastAPI(
    title="Hematoinfectology Consult",
    description="Clinical documentation and antimicrobial stewardship for a hematology infectious-disease consult service",
    version="1.0.0",
    lifespan=lifespan,
)


# ============================================================
# ✅ Error handlers
# ============================================================
@app.exception_handler(ClinicalError)
async def clinical_error_handler(request: Request, exc: ClinicalError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Reshape pydantic errors into the same {"message", "field"} body as ValidationError."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    return JSONResponse(
        status_code=400,
        content={"message": first.get("msg", "Invalid request"), "field": ".".join(loc) or None},
    )


# Include routers with prefixes
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(system_router, prefix="/api", tags=["Patients, Templates & Audit"])
app.include_router(note_router, prefix="/api", tags=["Evolutions & Chat"])
app.include_router(alert_router, prefix="/api", tags=["Antibiotics, Cultures & Alerts"])
app.include_router(voice_router, prefix="/api/voice", tags=["Voice"])
app.include_router(vision_router, prefix="/api/ocr", tags=["Lab Sheet OCR"])
app.include_router(config_router, prefix="/api/system", tags=["Configuration"])
app.include_router(reset_config_route, prefix="/api/system")


@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.APP_NAME}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
