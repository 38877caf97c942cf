"""Run with: python -m chat_adapter"""

import uvicorn

from chat_adapter.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "chat_adapter.main:app",
        host=settings.host,
        port=settings.port,
    )
