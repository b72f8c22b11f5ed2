# backend/classcheck/utils/decorators.py
"""Role decorators. Use under ``@jwt_required()``."""
from functools import wraps
from flask import g
from flask_limiter.util import get_remote_address
from flask_jwt_extended import get_jwt_identity
from classcheck.services import get_services
from classcheck.store.base import Tables
from classcheck.utils.exceptions import NotFound
from classcheck.utils.helpers import error_response

def load_current_user():
    """Fetch the caller's user row and keep it on ``g``."""
    identity = get_jwt_identity()
    try:
        user = get_services().store.get(Tables.USERS, int(identity))
    except (TypeError, ValueError, NotFound):
        return None
    g.current_user = user
    return user

def rate_limit_key() -> str:
    """Limit per signed-in user; anonymous callers fall back to their address."""
    try:
        identity = get_jwt_identity()
    except RuntimeError:
        identity = None
    
    if identity is None:
        return get_remote_address()
    return f"user:{identity}"

def user_required(f):
    """Decorator to require any known user."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if load_current_user() is None:
            return error_response("User not found", 404)
        
        return f(*args, **kwargs)
    return decorated_function

def professor_required(f):
    """Decorator to require professor role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = load_current_user()
        
        if not user:
            return error_response("User not found", 404)
        
        if not user.is_professor:
            return error_response("Professor access required", 403)
        
        return f(*args, **kwargs)
    return decorated_function

def student_required(f):
    """Decorator to require student role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = load_current_user()
        
        if not user:
            return error_response("User not found", 404)
        
        if user.is_professor:
            return error_response("Student access required", 403)
        
        return f(*args, **kwargs)
    return decorated_function
