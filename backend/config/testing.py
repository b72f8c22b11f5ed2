"""Testing configuration."""
from datetime import timedelta

class TestingConfig:
    """Testing configuration class."""
    
    # Basic Flask config
    DEBUG = False
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    
    # Database (in-memory SQLite for testing)
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    
    # In-process change bus, no redis needed
    REALTIME_BACKEND = 'memory'
    REDIS_URL = None
    SSE_HEARTBEAT_SECONDS = 1
    
    # JWT Configuration
    JWT_SECRET_KEY = 'test-jwt-secret'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=5)
    
    # CORS
    CORS_ORIGINS = ["*"]
    
    # Rate Limiting (disabled for testing)
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = 'memory://'
    
    # Check-in
    CHECKIN_PROXIMITY_FEET = 500.0
    CHECKIN_RATE_LIMIT = '30 per minute'
    
    # Logging
    LOG_LEVEL = 'WARNING'
    LOG_FILE = None
