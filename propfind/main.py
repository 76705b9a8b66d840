import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from propfind.controllers import (
    app_settings_controller, auth_controller, favorite_controller, health_controller,
    property_controller, upload_controller, user_controller,
)
from propfind.core.config import settings
from propfind.core.dependencies import lifespan
from propfind.core.errors import register_exception_handlers
from propfind.core.rate_limit import limiter

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Cria a aplicação FastAPI com lifespan
app = FastAPI(title="PropFind API", lifespan=lifespan)
app.state.limiter = limiter
register_exception_handlers(app)

origins = settings.cors_origins_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # Cookie de sessão exige origem explícita
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Endpoints ---
app.include_router(auth_controller.router)
app.include_router(property_controller.router)
app.include_router(favorite_controller.router)
app.include_router(user_controller.router)
app.include_router(app_settings_controller.router)
app.include_router(upload_controller.router)
app.include_router(health_controller.router)
