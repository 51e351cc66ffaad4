import logging
import os

from dotenv import load_dotenv

from courtbook.config import get_settings
from courtbook.constants import Role
from courtbook.database import create_db_engine, create_session_factory, init_schema
from courtbook.services.roles import RoleStore


# ======================================================
# ENV
# ======================================================

load_dotenv()

ADMIN_IDENTITY_ID = os.getenv("ADMIN_IDENTITY_ID")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")

if not ADMIN_IDENTITY_ID:
    raise RuntimeError("ADMIN_IDENTITY_ID is not set")

logger = logging.getLogger("init_admin")


# ======================================================
# MAIN LOGIC
# ======================================================

def main():
    logging.basicConfig(level=logging.INFO, format="[BOOTSTRAP] %(message)s")

    settings = get_settings()
    engine = create_db_engine(settings.resolved_database_url)
    if settings.auto_create_schema:
        init_schema(engine)

    roles = RoleStore(create_session_factory(engine))
    try:
        if roles.get_role(ADMIN_IDENTITY_ID) is Role.ADMIN:
            logger.info("Admin already exists, nothing to do")
            return

        assigned = roles.assign_role(ADMIN_IDENTITY_ID, Role.ADMIN, email=ADMIN_EMAIL)
        logger.info(f"Admin role granted ({assigned.identity_id}, {assigned.email or 'no email'})")
    finally:
        engine.dispose()


# ======================================================
# ENTRYPOINT
# ======================================================

if __name__ == "__main__":
    main()
