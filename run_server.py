#!/usr/bin/env python3

import uvicorn

from leverage_vault.config import get_settings
from leverage_vault.main import app

if __name__ == "__main__":
    settings = get_settings()
    print("Starting Factor leverage vault pools server...")
    print(f"Pools endpoint: http://localhost:{settings.PORT}/api/pools")
    print("Press Ctrl+C to stop the server")

    try:
        uvicorn.run(
            app,
            host=settings.HOST,
            port=settings.PORT,
            reload=False,
            log_level=settings.LOG_LEVEL.lower(),
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
