"""
FastAPI dependencies (DB session, authentication)
"""
from fastapi import Request, HTTPException, status
from sqlalchemy.orm import Session

from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.models import AccountModel
from app.domain.account import ROLE_ADMIN, ROLE_HOUSEHOLD, STAFF_ROLES


# Re-export get_db
get_db = _get_db


def login_session(request: Request, account: AccountModel, portal: str | None = None) -> None:
    """
    Remember the logged-in account in the signed session cookie.

    The stored role is the portal entered, which differs from account.role
    only for PORTAL_OVERRIDE_IDENTIFIERS.
    """
    request.session["account_id"] = account.household_id
    request.session["role"] = portal or account.role


def get_current_account(request: Request, db: Session) -> AccountModel:
    """
    Current account from the session (for API endpoints)

    Raises:
        HTTPException(401): not logged in or account deleted
    """
    account_id = request.session.get("account_id")
    if not account_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    account = db.query(AccountModel).filter(AccountModel.household_id == account_id).first()
    if not account:
        request.session.clear()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account not found"
        )

    return account


def _require_roles(request: Request, db: Session, roles: tuple[str, ...]) -> AccountModel:
    account = get_current_account(request, db)
    if request.session.get("role") not in roles:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return account


def require_household(request: Request, db: Session) -> AccountModel:
    return _require_roles(request, db, (ROLE_HOUSEHOLD,))


def require_staff(request: Request, db: Session) -> AccountModel:
    return _require_roles(request, db, STAFF_ROLES)


def require_admin(request: Request, db: Session) -> AccountModel:
    """Current account if the session belongs to the admin portal, otherwise 403."""
    return _require_roles(request, db, (ROLE_ADMIN,))
