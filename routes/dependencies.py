from fastapi import Request
from fastapi.responses import JSONResponse

from db import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def failed_response():
    return JSONResponse(status_code=500, content={"success": False, "message": "failed"})
