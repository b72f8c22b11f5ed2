# File: backend/classcheck/services/seed_service.py
"""Database seeding service for demo data."""
from classcheck.store.base import Eq, Tables

class SeedService:
    """Service to seed the store with a professor, students and courses."""
    
    PROFESSOR = ('prof.rivera@university.edu', 'Dr. Elena Rivera')
    STUDENTS = [
        ('alex.kim@university.edu', 'Alex Kim'),
        ('jordan.lee@university.edu', 'Jordan Lee'),
        ('sam.patel@university.edu', 'Sam Patel'),
    ]
    COURSES = [
        {
            'name': 'Data Structures',
            'code': 'CS 225',
            'schedule': 'MWF 10:00 - 10:50 AM',
            'location': 'Siebel Center 1404',
            'latitude': 40.1138,
            'longitude': -88.2249,
        },
        {
            'name': 'Technical Writing',
            'code': 'ENG 270',
            'schedule': 'TTh 2:00 - 3:15 PM',
            'location': 'Online',
        },
    ]
    
    @staticmethod
    def seed_all(services):
        """Seed all demo data. Existing users, courses and enrollments are reused."""
        professor = SeedService._user(services.store, *SeedService.PROFESSOR, is_professor=True)
        students = [
            SeedService._user(services.store, email, name, is_professor=False)
            for email, name in SeedService.STUDENTS
        ]
        
        courses = []
        for fields in SeedService.COURSES:
            course = SeedService._course(services, professor, fields)
            for student in students:
                if not services.courses.is_enrolled(student.id, course.id):
                    services.courses.enroll(student.id, course.id)
            courses.append(course)
        
        print(f"✅ Seeded {len(courses)} courses with {len(students)} students each")
        return professor, students, courses
    
    @staticmethod
    def _course(services, professor, fields):
        existing = services.store.list(Tables.COURSES, [
            Eq('professor_id', professor.id),
            Eq('code', fields['code'])
        ])
        if existing:
            return existing[0]
        return services.courses.create_course(professor.id, **fields)
    
    @staticmethod
    def _user(store, email: str, name: str, is_professor: bool):
        existing = store.list(Tables.USERS, [Eq('email', email)])
        if existing:
            return existing[0]
        return store.create(Tables.USERS, {
            'email': email,
            'name': name,
            'is_professor': is_professor
        })
