"""Taskboard - task management REST API.

Users register and log in with email and password, then manage their own
tasks through a JWT-protected CRUD API with pagination and filtering. Data
lives in MongoDB (async, via motor).

Example:
    Run the server:
    ```python
    import uvicorn
    from taskboard import create_app

    uvicorn.run(create_app(), host="0.0.0.0", port=5000)
    ```

    Via command line:
    ```bash
    python -m taskboard init-db
    python -m taskboard serve --reload
    python -m taskboard status
    ```
"""

from .app import create_app
from .core.settings import TaskboardConfig, TaskboardSettings, get_taskboard_config
from .db import TaskboardDB

__all__ = [
    "TaskboardConfig",
    "TaskboardDB",
    "TaskboardSettings",
    "create_app",
    "get_taskboard_config",
]
