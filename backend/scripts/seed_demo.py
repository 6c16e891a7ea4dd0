"""CLI script to load demo courses and students into the backend DB.
Usage: python scripts/seed_demo.py [--database-url URL]
"""
import sys
import argparse
import pathlib
from datetime import date
from typing import Optional
# Ensure `backend/` is on sys.path so `school_api` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from school_api import services
from school_api.config import get_settings
from school_api.database import Database
from school_api.errors import DuplicateKeyError

DEMO_COURSES = [
    {'name': 'Software Development', 'description': 'Programming fundamentals and project work', 'duration': 12},
    {'name': 'Data Analysis', 'description': 'Spreadsheets, SQL and basic statistics', 'duration': 8},
    {'name': 'Digital Design', 'description': 'Layout, colour and typography', 'duration': 6, 'status': 'inactive'},
]

DEMO_STUDENTS = [
    ('Ava Thompson', 'ava.thompson@example.edu', 'Software Development', 'active'),
    ('Noah Patel', 'noah.patel@example.edu', 'Software Development', 'active'),
    ('Mia Chen', 'mia.chen@example.edu', 'Data Analysis', 'inactive'),
]


def main(database_url: Optional[str] = None):
    """Create the demo records, skipping any that already exist.

    Students reference courses by id, so courses are created (or looked
    up by name) first.
    """
    settings = get_settings(DATABASE_URL=database_url) if database_url else get_settings()
    db = Database(settings.DATABASE_URL)
    db.create_db_and_tables()
    with db.session() as session:
        course_svc = services.CourseService(session)
        student_svc = services.StudentService(session)
        course_ids = {}
        for fields in DEMO_COURSES:
            try:
                course = course_svc.create(fields)
                print(f"Created course {course.name} ({course.id})")
            except DuplicateKeyError:
                course = next(c for c in course_svc.list() if c.name == fields['name'])
                print(f"Course {course.name} already exists, skipped")
            course_ids[course.name] = course.id
        for name, email, course_name, status in DEMO_STUDENTS:
            fields = {
                'name': name,
                'email': email,
                'course': course_ids[course_name],
                'enrollmentDate': date.today(),
                'status': status,
            }
            try:
                student = student_svc.create(fields)
                print(f"Created student {student.name} ({student.id})")
            except DuplicateKeyError:
                print(f"Student {email} already exists, skipped")
        stats = services.DashboardService(session).get_stats()
    db.dispose()
    print(f"Dashboard: {stats}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--database-url', help='Override DATABASE_URL for this run')
    args = parser.parse_args()
    main(database_url=args.database_url)
