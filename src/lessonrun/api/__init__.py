"""
Expose the FastAPI application instance.

Importing this module will create a FastAPI application and register
all routes.  Run the server with Uvicorn through the package's ``-m``
entry point:

```sh
python -m lessonrun.api
```
"""

from .main import app

__all__ = ["app"]
