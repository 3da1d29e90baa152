"""Access policy predicates for every project-scoped record.

Each predicate is a pure function of the acting user, the target row and, where
project access matters, the ``projects`` and ``project_student`` tables. None of
them consults another predicate's result set, so no check can recurse into
itself.
"""

from typing import Optional, Set

from sqlalchemy.orm import Session

from app.models.enums import DocumentStatus, Role
from app.models.project import Project, ProjectStudent
from app.models.user import User


STUDENT = Role.STUDENT
ADVISOR = Role.ADVISOR
PROJECT_OFFICER = Role.PROJECT_OFFICER

ALL_ROLES = (STUDENT, ADVISOR, PROJECT_OFFICER)

# Documents in any of these states have been handed in and are visible to the advisor.
SUBMITTED_STATUSES = (DocumentStatus.PENDING, DocumentStatus.APPROVED, DocumentStatus.REJECTED)


def is_student(user: User) -> bool:
    return user.role == STUDENT


def is_advisor(user: User) -> bool:
    return user.role == ADVISOR


def is_project_officer(user: User) -> bool:
    return user.role == PROJECT_OFFICER


def is_project_advisor(project: Project, user: User) -> bool:
    return project.advisor_id is not None and project.advisor_id == user.user_id


def is_assigned_officer(project: Project, user: User) -> bool:
    return project.project_officer_id is not None and project.project_officer_id == user.user_id


def is_enrolled(db: Session, project_id: int, user_id: int) -> bool:
    return db.query(ProjectStudent.member_id).filter(
        ProjectStudent.project_id == project_id,
        ProjectStudent.student_id == user_id,
    ).first() is not None


def enrolled_project_ids(db: Session, user_id: int) -> Set[int]:
    return {
        int(row[0])
        for row in db.query(ProjectStudent.project_id)
        .filter(ProjectStudent.student_id == user_id)
        .all()
    }


def has_project_access(db: Session, project: Project, user: User) -> bool:
    if is_project_officer(user):
        return True
    if is_project_advisor(project, user) or is_assigned_officer(project, user):
        return True
    return is_enrolled(db, project.project_id, user.user_id)


# --- accounts -------------------------------------------------------------

def can_update_profile(target: User, user: User) -> bool:
    return target.user_id == user.user_id


def can_change_role(user: User) -> bool:
    return is_project_officer(user)


# --- projects -------------------------------------------------------------

def can_create_project(user: User) -> bool:
    return is_project_officer(user)


def can_update_project(project: Project, user: User) -> bool:
    return (
        is_project_officer(user)
        or is_project_advisor(project, user)
        or is_assigned_officer(project, user)
    )


def can_reassign_project(user: User) -> bool:
    # Moving the advisor/officer references is an administrative action.
    return is_project_officer(user)


def can_view_membership(project: Project, member: ProjectStudent, user: User) -> bool:
    if member.student_id == user.user_id:
        return True
    if is_project_officer(user):
        return True
    return is_project_advisor(project, user) or is_assigned_officer(project, user)


def can_manage_membership(user: User) -> bool:
    return is_project_officer(user)


# --- deadlines ------------------------------------------------------------

def can_manage_deadline(project: Project, user: User) -> bool:
    return is_project_officer(user) or is_project_advisor(project, user)


# --- documents ------------------------------------------------------------

def can_view_document(project: Project, document, user: User) -> bool:
    if document.submitted_by == user.user_id:
        return True
    if is_project_officer(user):
        return True
    return is_project_advisor(project, user) and document.status in SUBMITTED_STATUSES


def can_create_document(db: Session, project: Project, user: User) -> bool:
    return is_student(user) and is_enrolled(db, project.project_id, user.user_id)


def can_review_document(project: Project, user: User) -> bool:
    return is_project_officer(user) or is_project_advisor(project, user)


def can_edit_document(document, user: User) -> bool:
    return document.submitted_by == user.user_id


# --- comments & chat ------------------------------------------------------

def can_view_document_comments(db: Session, document, user: User) -> bool:
    return has_project_access(db, document.project, user)


def can_comment_on_project(db: Session, project: Project, user: User) -> bool:
    return has_project_access(db, project, user)


def can_view_project_comments(user: Optional[User]) -> bool:
    # The project-level thread is readable by any authenticated account.
    return user is not None and user.role in ALL_ROLES


def is_author(row, user: User) -> bool:
    return getattr(row, "author_id", None) == user.user_id


# --- notifications --------------------------------------------------------

def can_broadcast(user: User) -> bool:
    return is_project_officer(user)


# --- resources ------------------------------------------------------------

def can_create_resource(user: User) -> bool:
    return is_project_officer(user)


def can_update_resource(resource, user: User) -> bool:
    return is_project_officer(user) or resource.uploaded_by == user.user_id


def can_delete_resource(user: User) -> bool:
    return is_project_officer(user)
