"""Production configuration."""
import os
from datetime import timedelta

class ProductionConfig:
    """Production configuration class."""
    
    # Basic Flask config
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv('SECRET_KEY')  # Must be set in production
    
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }
    
    # Realtime change bus; several workers need redis to see each other's writes
    REALTIME_BACKEND = os.getenv('REALTIME_BACKEND', 'redis')
    REDIS_URL = os.getenv('REDIS_URL')
    SSE_HEARTBEAT_SECONDS = 20
    
    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    
    # CORS
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*').split(',')
    
    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL') or 'memory://'
    RATELIMIT_DEFAULT = "300/hour"
    
    # Check-in
    CHECKIN_PROXIMITY_FEET = float(os.getenv('CHECKIN_PROXIMITY_FEET', 500.0))
    CHECKIN_RATE_LIMIT = os.getenv('CHECKIN_RATE_LIMIT', '30 per minute')
    
    # Logging
    LOG_LEVEL = 'INFO'
    LOG_FILE = os.getenv('LOG_FILE', '/app/logs/classcheck.log')
