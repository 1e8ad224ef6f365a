import os

from fastapi import APIRouter, Depends

from filestore_api.config.settings import Settings
from filestore_api.dependencies import get_app_settings

router = APIRouter()


@router.get("/health")
def health_check(settings: Settings = Depends(get_app_settings)):
    """
    Health check endpoint for monitoring API status and storage readiness.

    Storage is ready when the root exists and the process can read and write it.
    """
    storage_root = settings.storage_path

    health_status = {
        "status": "ok",
        "storage_dir": storage_root.as_posix(),
        "components": {
            "api": "ready",
            "storage": "ready",
        },
        "ready": False,
    }

    if not storage_root.is_dir():
        health_status["components"]["storage"] = "error: storage directory missing"
        health_status["status"] = "degraded"
    elif not os.access(storage_root, os.R_OK | os.W_OK):
        health_status["components"]["storage"] = "error: storage directory not writable"
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )
    return health_status
