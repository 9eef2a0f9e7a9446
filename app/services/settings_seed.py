import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

from app.models.person import Person, PersonRole


def seed_admin(db: Session, email: str | None, name: str = "Administrateur") -> Person | None:
    """Ensure the bootstrap administrator exists. Safe to run on every startup."""
    if not email:
        return None
    email = email.strip().lower()
    person = db.scalar(select(Person).where(Person.email == email))
    if person is None:
        person = Person(name=name, email=email, role=PersonRole.admin, is_active=True)
        db.add(person)
        db.flush()
        logger.info("Created bootstrap admin %s", email)
        return person
    if person.role != PersonRole.admin or not person.is_active:
        person.role = PersonRole.admin
        person.is_active = True
        db.flush()
        logger.info("Promoted %s to admin", email)
    return person
