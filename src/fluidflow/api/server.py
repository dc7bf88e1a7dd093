"""
Development server for the fluidflow API.

`.env` is loaded before the app is built, so the Gemini key and the `FLUID_*`
settings are visible to the controller that `create_app()` wires up. The
module-level `app` is what `uvicorn fluidflow.api.server:app` imports.

Usage
-----
    $ fluidflow-api
    $ uvicorn fluidflow.api.server:app --reload
"""

import uvicorn
from dotenv import load_dotenv

from fluidflow.api.app import create_app
from fluidflow.core.settings import load_settings

load_dotenv()

app = create_app()


def main() -> None:
    """Run uvicorn with reload on the configured host and port."""
    cfg = load_settings()
    store = cfg.store_path.resolve()
    print(f"{'[ fluidflow ]':=^60}")
    print(f"{'environment':<16} : {cfg.environment}")
    print(f"{'model':<16} : {cfg.model_alias}")
    print(f"{'store':<16} : {store}")
    if cfg.has_api_key:
        print(f"{'GOOGLE_API_KEY':<16} : ✅ Loaded ({cfg.google_api_key[:8]}...)")  # type: ignore[index]
    else:
        print(f"{'GOOGLE_API_KEY':<16} : ❌ Missing (every chat turn will fail)")
    print("=" * 60)

    uvicorn.run(
        "fluidflow.api.server:app",
        host=cfg.host,
        port=cfg.port,
        reload=cfg.is_dev,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
