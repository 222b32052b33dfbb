import datetime
import logging
import fastapi
import sqlalchemy
import sqlalchemy.ext.asyncio
import hoaxify.database
import hoaxify.schemas.responses

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/health", tags=["Health"])

SERVICE_NAME = "hoaxify"
SERVICE_VERSION = "1.0.0"


@router.get(
    "",
    response_model=hoaxify.schemas.responses.HealthResponse,
    summary="Basic health check"
)
async def health():
    return hoaxify.schemas.responses.HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.datetime.now().isoformat()
    )


@router.get(
    "/deep",
    response_model=hoaxify.schemas.responses.DeepHealthResponse,
    summary="Deep health check",
    description="Returns health status of the service and its database"
)
async def deep_health(
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(hoaxify.database.get_db)
):
    dependencies = {}

    try:
        await session.execute(sqlalchemy.text("SELECT 1"))
        dependencies["database"] = "healthy"
    except Exception as e:
        logger.warning(f"Database health check failed: {str(e)}")
        dependencies["database"] = "unhealthy"

    overall_status = "healthy" if all(v == "healthy" for v in dependencies.values()) else "degraded"

    return hoaxify.schemas.responses.DeepHealthResponse(
        status=overall_status,
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.datetime.now().isoformat(),
        dependencies=dependencies
    )
