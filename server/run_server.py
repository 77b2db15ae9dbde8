"""
Standalone entry point for the API server.

Starts uvicorn on HOST:PORT (127.0.0.1:8000 by default) with a single
worker; per-user catalog locks are held in process. The backing bucket
is created first when it does not exist yet.
"""
import os

import uvicorn

from tierstore.dependencies import object_store
from tierstore.main import app

if __name__ == "__main__":
    object_store.ensure_bucket()
    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        workers=1,
        log_level="warning",
    )
