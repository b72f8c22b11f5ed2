"""User model. Accounts are managed elsewhere; this row only names people."""
from classcheck import db
from classcheck.models.base import BaseModel

class User(BaseModel):
    """Student or professor."""
    
    __tablename__ = 'users'
    
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    is_professor = db.Column(db.Boolean, default=False, nullable=False)
    
    def __repr__(self):
        return f'<User {self.email}>'
