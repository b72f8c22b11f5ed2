# File: backend/run.py
"""Application entry point."""
import atexit
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from classcheck import create_app  # noqa: E402  needs the environment loaded
from config import current_env  # noqa: E402

# Create Flask app
env = current_env('development')
app = create_app(env)
atexit.register(app.extensions['classcheck'].close)

if __name__ == '__main__':
    # Development server
    port = int(os.environ.get('PORT', 5000))
    host = os.environ.get('HOST', '127.0.0.1')
    debug = env == 'development'
    
    # threaded so SSE streams don't block other requests
    app.run(host=host, port=port, debug=debug, threaded=True)
