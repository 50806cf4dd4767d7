from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import providers, signup
from app.core.airtable import ConfigurationError
from app.core.config import settings
from app.models.providers import ErrorEnvelope
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="VRN API",
    description="Backend API for the Verified Response Network provider registry",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(providers.router)
app.include_router(signup.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    # Names only; never echo credential values.
    logger.error("Airtable configuration incomplete: missing %s", exc.missing)
    envelope = ErrorEnvelope(
        error="Server configuration error",
        details=f"Missing required settings: {', '.join(exc.missing)}",
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope.model_dump(exclude_none=True),
    )


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "vrn-api"}
