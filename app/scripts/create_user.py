"""
Create a local user with a given role (e.g. an extra admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user ops@example.com your-secure-password ADMIN
"""
import argparse
import sys

from email_validator import EmailNotValidError, validate_email

from app.core.database import SessionLocal
from app.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, hash_password
from app.models.user import AuthProvider, RoleName, User
from app.repositories.users import RoleRepository, UserRepository, normalize_email


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an OnTheGoRentals user.")
    parser.add_argument("email", help=f"Email address (1-{EMAIL_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=RoleName.USER.value,
        choices=[r.value for r in RoleName],
    )
    parser.add_argument("--first-name", default="")
    parser.add_argument("--last-name", default="")
    args = parser.parse_args()

    try:
        email = normalize_email(validate_email(args.email, check_deliverability=False).normalized)
    except EmailNotValidError as e:
        print(f"Invalid email address: {e}", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.email_exists(email):
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        role = RoleRepository(db).find_by_role_name(args.role)
        if role is None:
            print(f"Role '{args.role}' not found; run 'python -m app.seed' first.", file=sys.stderr)
            return 1
        users.save(
            User(
                first_name=args.first_name or None,
                last_name=args.last_name or None,
                email=email,
                password_hash=hash_password(args.password),
                auth_provider=AuthProvider.LOCAL.value,
                deleted=False,
                roles=[role],
            )
        )
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
