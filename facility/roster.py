import secrets
from dataclasses import replace
from typing import Optional
from core.entities import Role, Staff
from core.state import CareHomeState
from exceptions.custom_errors import NotFoundError, UnauthorizedError, ValidationError
from utils.validate import validate_staff


def is_manager(state: CareHomeState, staff_id: Optional[str]) -> bool:
    """True only for the designated manager."""
    return (
        staff_id is not None
        and staff_id == state.manager_id
        and state.role_of(staff_id) == Role.MANAGER
    )


def is_bootstrap(state: CareHomeState, staff: Staff) -> bool:
    """The very first manager may be created without an existing one."""
    return not state.staff_by_id and staff.role == Role.MANAGER


def require_staff(state: CareHomeState, staff_id: str) -> Staff:
    s = state.staff_by_id.get(staff_id)
    if s is None:
        raise NotFoundError(f"Unknown staff: {staff_id}")
    return s


def require_actor(state: CareHomeState, actor_id: str) -> Staff:
    s = state.staff_by_id.get(actor_id)
    if s is None:
        raise UnauthorizedError(f"Unrecognized staff: {actor_id}")
    return s


def require_manager(state: CareHomeState, actor_id: str):
    if not is_manager(state, actor_id):
        raise UnauthorizedError("Only manager allowed for this action")


def require_role(state: CareHomeState, actor_id: str, *roles: Role) -> Staff:
    s = state.staff_by_id.get(actor_id)
    if s is None or s.role not in roles:
        wanted = " or ".join(r.value for r in roles)
        raise UnauthorizedError(f"Requires role {wanted}")
    return s


def put_staff(state: CareHomeState, staff: Staff):
    """Store a staff record and keep the role indices in sync."""
    state.staff_by_id[staff.id] = staff

    for ids in (state.doctor_ids, state.nurse_ids):
        if staff.id in ids:
            ids.remove(staff.id)

    if staff.role == Role.DOCTOR:
        state.doctor_ids.append(staff.id)
    elif staff.role == Role.NURSE:
        state.nurse_ids.append(staff.id)
    elif staff.role == Role.MANAGER:
        state.manager_id = staff.id

    if state.manager_id == staff.id and staff.role != Role.MANAGER:
        state.manager_id = None


def prepare_staff(
    state: CareHomeState, staff: Staff, username: Optional[str], password: Optional[str]
) -> Staff:
    """Validate a staff upsert and return the record to store, credentials attached."""
    errors = validate_staff(staff)
    if staff.id == state.manager_id and staff.role != Role.MANAGER:
        errors.append(
            f" • {staff.id} is the designated manager and cannot change role.\n"
        )
    if errors:
        raise ValidationError("".join(errors).strip())
    return replace(staff, username=username, password=password)


def authenticate(state: CareHomeState, staff_id: str, password: str) -> Staff:
    s = state.staff_by_id.get(staff_id)
    if s is None:
        raise UnauthorizedError("Unknown staff ID")
    if not _password_matches(s, password):
        raise UnauthorizedError("Invalid password")
    return s


def authenticate_username(state: CareHomeState, username: str, password: str) -> Staff:
    for s in state.staff_by_id.values():
        if s.username is not None and s.username == username:
            if not _password_matches(s, password):
                raise UnauthorizedError("Invalid password")
            return s
    raise UnauthorizedError("Unknown username")


def _password_matches(staff: Staff, password: Optional[str]) -> bool:
    if staff.password is None or password is None:
        return False
    return secrets.compare_digest(str(staff.password), str(password))
