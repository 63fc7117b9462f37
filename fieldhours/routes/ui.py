import os

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse


router = APIRouter(tags=["ui"])


@router.get("/", include_in_schema=False)
def index(request: Request):
    index_path = request.app.state.settings.index_path
    if not os.path.isfile(index_path):
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(index_path, headers={"Cache-Control": "no-cache, no-store, must-revalidate"})
