"""
Run the API server.

    python -m tenant_ledger
"""

import uvicorn

from tenant_ledger.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "tenant_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
