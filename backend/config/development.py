"""Development configuration."""
import os
from datetime import timedelta

class DevelopmentConfig:
    """Development configuration class."""
    
    # Basic Flask config
    DEBUG = True
    TESTING = False
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DEV_DATABASE_URL', 'sqlite:///classcheck_dev.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    
    # Realtime change bus ('memory' or 'redis')
    REALTIME_BACKEND = os.getenv('REALTIME_BACKEND', 'memory')
    REDIS_URL = os.getenv('REDIS_URL')
    SSE_HEARTBEAT_SECONDS = 15
    
    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=12)
    
    # CORS
    CORS_ORIGINS = ["http://localhost:*", "http://127.0.0.1:*"]
    
    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL') or 'memory://'
    RATELIMIT_DEFAULT = "1000 per hour"
    
    # Check-in
    CHECKIN_PROXIMITY_FEET = float(os.getenv('CHECKIN_PROXIMITY_FEET', 500.0))
    CHECKIN_RATE_LIMIT = os.getenv('CHECKIN_RATE_LIMIT', '30 per minute')
    
    # Logging
    LOG_LEVEL = 'DEBUG'
    LOG_FILE = 'logs/classcheck.log'
