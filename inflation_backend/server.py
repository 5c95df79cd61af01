#setup: python -m venv .venv
#setup: source .venv/bin/activate   # (windows: .venv\Scripts\activate)
#setup: pip install -U pip -e ".[test]"
#setup: flask --app inflation_backend.server run --port 3000 --debug

from __future__ import annotations

from inflation_backend.app import create_app
from inflation_backend.config import settings

app = create_app(settings)


if __name__ == "__main__":
    app.run(host=settings.APP_HOST, port=settings.APP_PORT, debug=True)
