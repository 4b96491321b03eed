import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from benefitcheck.config import settings
from benefitcheck.database import close_mongo_connection, connect_to_mongo, get_database, ping
from benefitcheck.routes import services_router, verification_router
from benefitcheck.services import EligibilityEngine, MongoAuditLogStore, MongoRuleStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_to_mongo()
    database = get_database()
    rule_store = MongoRuleStore(database)
    audit_log = MongoAuditLogStore(database)
    await rule_store.ensure_indexes()
    await audit_log.ensure_indexes()
    app.state.engine = EligibilityEngine.from_settings(rule_store, audit_log, settings)
    logger.info("Connected to MongoDB")
    yield
    # Shutdown
    await close_mongo_connection()
    logger.info("Disconnected from MongoDB")


app = FastAPI(
    title=settings.app_name,
    description="Verifiable-credential eligibility checks for government benefit services",
    version=settings.app_version,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as 400 with one message per field"""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"success": False, "detail": "Invalid request", "errors": errors}
    )


app.include_router(verification_router, prefix=settings.api_prefix)
app.include_router(services_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {"message": f"{settings.app_name} is running", "version": settings.app_version}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    database_ok = await ping()
    return {
        "status": "healthy" if database_ok else "degraded",
        "service": "benefitcheck",
        "database": "connected" if database_ok else "unavailable"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("benefitcheck.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
