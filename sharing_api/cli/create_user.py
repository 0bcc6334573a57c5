import sys

from sqlalchemy import select

from sharing_api.database import SessionLocal, engine, Base
from sharing_api.models.user import User


def main():
    Base.metadata.create_all(bind=engine)

    email = input("Email: ").strip().lower()
    name = input("Name: ").strip()
    password = input("Password: ").strip()

    if not all([email, name, password]):
        print("All fields are required.")
        sys.exit(1)

    db = SessionLocal()
    try:
        existing = db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

        # Accounts created by a share invitation are claimed here.
        if existing is not None and existing.is_active:
            print(f"User with email {email} already exists.")
            sys.exit(1)

        user = existing or User(email=email, name=name, password_hash="")
        user.name = name
        user.is_active = True
        user.set_password(password)
        db.add(user)
        db.commit()
        print(f"User '{name}' is ready to sign in.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
