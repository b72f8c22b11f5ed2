"""WSGI configuration for production deployment."""
import atexit
from dotenv import load_dotenv

load_dotenv()

from classcheck import create_app  # noqa: E402
from config import current_env  # noqa: E402

# Create Flask application instance
app = create_app(current_env('production'))
atexit.register(app.extensions['classcheck'].close)

if __name__ == "__main__":
    app.run()
