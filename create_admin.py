"""
Create the first admin account (admins cannot sign up themselves)

Usage:
    python create_admin.py <identifier> "<name>"
"""
import sys

from app.infrastructure.db.session import get_db
from app.infrastructure.db.repositories import AccountRepository
from app.application.accounts import ProvisionAccountUseCase
from app.domain.account import normalize_identifier

identifier = sys.argv[1] if len(sys.argv) > 1 else "9000000001"
name = sys.argv[2] if len(sys.argv) > 2 else "EcoTrack Admin"

db = next(get_db())

existing = AccountRepository(db).get_by_identifier(normalize_identifier(identifier))
if existing:
    print(f"Account already exists: {existing.identifier} ({existing.household_id}, {existing.role})")
else:
    account = ProvisionAccountUseCase(db).execute(name=name, identifier=identifier, role="admin")
    print("Created admin:")
    print(f"  Identifier: {account.identifier}")
    print(f"  Account ID: {account.household_id}")
    print("  Log in through the admin portal with an OTP")

db.close()
