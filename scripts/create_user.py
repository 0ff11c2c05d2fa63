import asyncio
import getpass
import os
import sys

from dotenv import load_dotenv

from akcity.application.use_cases.create_user import CreateUserRequest
from akcity.core.config import Settings
from akcity.core.container import build_container
from akcity.core.logging import configure_logging
from akcity.domain.models import UserRole


async def main() -> int:
    load_dotenv()
    configure_logging()

    name = os.getenv("SEED_USER_NAME") or input("Full name: ").strip()
    email = os.getenv("SEED_USER_EMAIL") or input("Email: ").strip()
    phone = os.getenv("SEED_USER_PHONE") or input("Phone: ").strip()
    role = os.getenv("SEED_USER_ROLE", UserRole.GENERAL_MANAGER.value)
    password = os.getenv("SEED_USER_PASSWORD") or getpass.getpass("Password: ").strip()

    container = build_container(Settings())
    try:
        result = await container.create_user.execute(
            CreateUserRequest(name=name, email=email, password=password, phone=phone, role=role)
        )
    finally:
        container.close()

    if not result.success:
        print(f"Could not create user: {result.message}", file=sys.stderr)
        for error in getattr(result.error, "errors", None) or []:
            print(f"  - {error}", file=sys.stderr)
        return 1

    print(f"Created {result.user.role.value} account {result.user.email} ({result.user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
