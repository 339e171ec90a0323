import os
import sys
from pathlib import Path

from werkzeug.security import generate_password_hash

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.kitchenops.models import User
from scripts._db_utils import script_session


def seed_only(*, database_url: str | None = None) -> None:
    """
    Create the initial admin account in an idempotent way.
    Does NOT overwrite an existing user's PIN.
    """
    admin_username = (os.environ.get("ADMIN_USERNAME") or "admin").strip()
    admin_pin = (os.environ.get("ADMIN_PIN") or "").strip()

    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///kitchenops.db").strip()

    with script_session(db_url) as s:
        existing = s.query(User).filter(User.username == admin_username).one_or_none()
        if existing:
            if not existing.is_admin:
                existing.is_admin = True
                print(f"Granted admin to existing user {admin_username!r}.", flush=True)
            else:
                print(f"Admin user {admin_username!r} already exists; PIN left unchanged.", flush=True)
            return

        if not admin_pin:
            raise RuntimeError("ADMIN_PIN must be set to create the initial admin user.")
        if len(admin_pin) < 4 or not admin_pin.isdigit():
            raise RuntimeError("ADMIN_PIN must be at least 4 digits.")

        s.add(User(username=admin_username, pin_hash=generate_password_hash(admin_pin), is_admin=True, is_active=True))
        print(f"Created admin user {admin_username!r}.", flush=True)


def main() -> None:
    seed_only()


if __name__ == "__main__":
    main()
