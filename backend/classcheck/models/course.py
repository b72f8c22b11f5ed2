"""Course model with optional geo-anchor."""
from classcheck import db
from classcheck.models.base import BaseModel

class Course(BaseModel):
    """A class taught by one professor."""
    
    __tablename__ = 'courses'
    extra_fields = ('has_anchor',)
    
    professor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    code = db.Column(db.String(50), nullable=False)
    schedule = db.Column(db.String(255), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    
    # Geo-anchor for proximity-gated check-in; absent when either half is null
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    proximity_threshold_feet = db.Column(db.Float, nullable=True)
    
    @property
    def has_anchor(self) -> bool:
        return self.latitude is not None and self.longitude is not None
    
    def __repr__(self):
        return f'<Course {self.code}>'
