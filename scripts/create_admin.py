import sys
import os
import argparse
import getpass
import logging

# Ensure we can import jobly modules
sys.path.append(os.getcwd())

from jobly.core.config import settings
from jobly.core.exceptions import BadRequestError
from jobly.database import Database
from jobly.services.users import UserService

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def create_admin_user(username: str, email: str, password: str):
    database = Database(settings.database_url)
    database.create_all()
    db = database.session()
    try:
        UserService(db).register({
            "username": username,
            "password": password,
            "firstName": "System",
            "lastName": "Administrator",
            "email": email,
            "isAdmin": True,
        })
        logger.info(f"Admin user '{username}' created successfully. You can now login.")
    except BadRequestError:
        logger.warning(f"Admin user '{username}' already exists.")
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a Jobly admin user")
    parser.add_argument("username")
    parser.add_argument("email")
    args = parser.parse_args()
    create_admin_user(args.username, args.email, getpass.getpass("Password: "))
