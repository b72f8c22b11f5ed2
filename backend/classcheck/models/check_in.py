"""Append-only record of a student's presence in a session."""
from datetime import datetime
from classcheck import db
from classcheck.models.base import BaseModel

class CheckIn(BaseModel):
    """Check-in model."""
    
    __tablename__ = 'check_ins'
    __table_args__ = (
        db.UniqueConstraint('session_id', 'student_id', name='uq_check_in_session_student'),
    )
    
    session_id = db.Column(db.Integer, db.ForeignKey('attendance_sessions.id'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    
    # Where the student reported being; distance is null when no anchor was set
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    distance_feet = db.Column(db.Float, nullable=True)
    
    def __repr__(self):
        return f'<CheckIn {self.student_id}-{self.session_id}>'
