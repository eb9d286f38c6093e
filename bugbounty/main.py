"""
Bug bounty platform - main entry point.

Serves the API with uvicorn using the configured host and port:

    python -m bugbounty.main
"""

from __future__ import annotations

import uvicorn

from bugbounty.config import get_settings


def main():
    """Main entry point."""
    settings = get_settings()
    uvicorn.run(
        "bugbounty.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
    )


if __name__ == "__main__":
    main()
