from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DuplicateIdentity, InvalidCredential, MissingRoleAttribute, NotFound
from ..logging_config import get_logger
from ..models import Role, UserORM
from ..schemas import EmployeeProfile, EmployerProfile, Profile, RegisterRequest
from ..security import hash_password, verify_password

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def profile_from_request(req: RegisterRequest) -> Profile:
    """Turn the flat registration payload into its role variant.

    This is the only place that looks at which role-specific fields are
    present; everything downstream works with the typed profile.
    """
    if req.role == Role.EMPLOYER:
        company_name = _clean(req.company_name)
        registration_number = _clean(req.business_registration_number)
        if not company_name or not registration_number:
            raise MissingRoleAttribute(
                "Company name and business registration number are required for employers"
            )
        return EmployerProfile(company_name=company_name, business_registration_number=registration_number)

    resume_url = _clean(req.resume_url)
    if not resume_url:
        raise MissingRoleAttribute("Resume URL is required for employees")
    return EmployeeProfile(resume_url=resume_url)


def find_by_email(db: Session, email: str) -> Optional[UserORM]:
    return db.query(UserORM).filter(UserORM.email == normalize_email(email)).one_or_none()


def register(db: Session, req: RegisterRequest) -> UserORM:
    email = normalize_email(req.email)
    if find_by_email(db, email) is not None:
        raise DuplicateIdentity()

    profile = profile_from_request(req)
    user = UserORM(
        full_name=req.full_name.strip(),
        email=email,
        password_hash=hash_password(req.password),
        phone_number=_clean(req.phone_number),
        **profile.model_dump(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # lost a race against a concurrent registration of the same email
        db.rollback()
        raise DuplicateIdentity(original_error=e)
    db.refresh(user)
    logger.info("registered user id=%s role=%s", user.id, user.role.value)
    return user


def authenticate(db: Session, email: str, password: str) -> UserORM:
    user = find_by_email(db, email)
    if not verify_password(password, user.password_hash if user else None):
        logger.warning("failed login for email=%s", normalize_email(email))
        raise InvalidCredential()
    return user


def fetch(db: Session, user_id: int) -> UserORM:
    user = db.get(UserORM, user_id)
    if user is None:
        raise NotFound("User not found")
    return user
