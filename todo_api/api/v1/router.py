from fastapi import APIRouter, Request

from ...routers import tasks as tasks_router
from ...routers import users as users_router


api_router = APIRouter(prefix="/v1")

# Endpoints are available at /v1/todos and /v1/users
api_router.include_router(tasks_router.router)
api_router.include_router(users_router.router)


@api_router.get("/", tags=["users"])  # lightweight meta endpoint
def api_info(request: Request):
    return {
        "name": "Todo API",
        "version": "v1",
        "docs": "/docs",
        "auth": {
            "header": request.app.state.context.settings.API_KEY_HEADER,
            "register": "/v1/users/register",
        },
        "todos": "/v1/todos",
    }
