from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/")
async def health_check(request: Request):
    """Basic health check endpoint."""
    config = request.app.state.settings
    return {
        "status": "healthy",
        "service": config.APP_NAME,
        "version": config.VERSION,
        "environment": config.ENVIRONMENT,
        "sage_pay_server": config.SAGE_PAY_SERVER.value,
    }
