import azure.functions as func

from app import app as fastapi_app
from config import settings
from services.sweeper import sweep_expired

app = func.AsgiFunctionApp(app=fastapi_app, http_auth_level=func.AuthLevel.ANONYMOUS)

if settings.sweep_enabled:

    @app.timer_trigger(schedule=settings.sweep_schedule, arg_name="timer", run_on_startup=False)
    async def sweep_expired_tokens(timer: func.TimerRequest) -> None:
        await sweep_expired(fastapi_app.state.token_store)
