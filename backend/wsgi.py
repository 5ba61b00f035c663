from dotenv import load_dotenv

# Config reads the environment at import time.
load_dotenv()

from quizroom.server import create_app  # noqa: E402
from quizroom.utils.logging_config import configure_logging  # noqa: E402

app, socketio = create_app()
configure_logging(app.config.get("LOG_LEVEL", "INFO"))
