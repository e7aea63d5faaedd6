"""Response envelope: {code, message, data?}"""
from typing import Any, Optional

from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask


def envelope(
    code: int,
    message: str,
    data: Any = None,
    background: Optional[BackgroundTask] = None,
) -> JSONResponse:
    content = {"code": code, "message": message}
    if data is not None:
        content["data"] = data
    return JSONResponse(status_code=code, content=content, background=background)
