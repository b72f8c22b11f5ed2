"""Student membership in a course."""
from classcheck import db
from classcheck.models.base import BaseModel

class Enrollment(BaseModel):
    """(student, course) pair."""
    
    __tablename__ = 'course_enrollments'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'course_id', name='uq_enrollment_student_course'),
    )
    
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.id'), nullable=False, index=True)
    
    def __repr__(self):
        return f'<Enrollment {self.student_id}-{self.course_id}>'
