"""
multiagent_store.api.__main__

`python -m multiagent_store.api` (or the `multiagent-store` script): serve the
catalog and assist API with uvicorn, configured from `MAS_*` settings.
"""

from __future__ import annotations

import uvicorn

from multiagent_store.api.app import create_app
from multiagent_store.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# uvicorn's own logging config and access log are off: `configure_logging` owns
# the root logger and `RequestContextMiddleware` emits the `http_request` event.
