"""Seed the database with a demo cohort: one officer, two advisors, four students and two projects."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.deadline import PhaseDeadline
from app.models.enums import Phase, ProjectStatus, Role
from app.models.project import Project, ProjectStudent
from app.models.user import User


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        officer = User(email="officer@fyp.local", full_name="Priya Officer", role=Role.PROJECT_OFFICER)
        advisors = [
            User(email="lee@fyp.local", full_name="Dr. Lee", role=Role.ADVISOR),
            User(email="okafor@fyp.local", full_name="Dr. Okafor", role=Role.ADVISOR),
        ]
        students = [
            User(email=f"student{i}@fyp.local", full_name=name, role=Role.STUDENT)
            for i, name in enumerate(["Ana Silva", "Ben Carter", "Chen Wei", "Dana Novak"], start=1)
        ]
        db.add_all([officer, *advisors, *students])
        db.flush()

        projects = [
            Project(
                title="Smart Irrigation Controller",
                description="Soil moisture driven watering schedules",
                status=ProjectStatus.ACTIVE,
                advisor_id=advisors[0].user_id,
                project_officer_id=officer.user_id,
            ),
            Project(
                title="Campus Indoor Navigation",
                description="BLE beacon wayfinding for the library",
                status=ProjectStatus.ACTIVE,
                advisor_id=advisors[1].user_id,
                project_officer_id=officer.user_id,
            ),
        ]
        db.add_all(projects)
        db.flush()

        for project, members in zip(projects, (students[:2], students[2:])):
            for student in members:
                db.add(ProjectStudent(project_id=project.project_id, student_id=student.user_id))
            for offset, phase in enumerate(Phase):
                db.add(PhaseDeadline(
                    project_id=project.project_id,
                    phase=phase,
                    deadline_date=date(2026, 11 + offset, 15) if offset < 2 else date(2027, offset - 1, 15),
                ))

        db.commit()
        print("Seed data created successfully.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
