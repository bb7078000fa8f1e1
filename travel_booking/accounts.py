import logging
from typing import List, Optional

import bcrypt
from fastapi import Depends

from . import models
from .exceptions import AuthenticationFailed, Conflict, InvalidInput, NotFound
from .identifiers import IdGenerator, id_generator
from .repositories import AdminRepository, UserRepository
from .storage import JsonDocumentStore, get_store
from .utils import mask_password

logger = logging.getLogger("accounts_service")

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], hashed.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


def is_bcrypt_hash(value: str) -> bool:
    return value.startswith(("$2a$", "$2b$", "$2y$"))


class AccountService:
    """User and admin accounts. Users log in by email, admins by username."""

    def __init__(self, users: UserRepository, admins: AdminRepository, ids: Optional[IdGenerator] = None):
        self.users = users
        self.admins = admins
        self.ids = ids or id_generator

    def register_user(self, name: Optional[str], email: Optional[str], password: Optional[str],
                      photo: Optional[str] = None) -> dict:
        if not email or not password:
            raise InvalidInput("Email and password are required")

        # Check and append under one lock so two sign-ups cannot both pass the check
        with self.users.locked():
            if self.users.get_by_email(email):
                raise Conflict("Email is already in use")

            user = models.User(
                id_user=self.ids.next_user_id(),
                name=name,
                email=email,
                username=email,
                password=hash_password(password),
                photo=photo or "",
            )
            self.users.add(user)

        logger.info(f"User {user.id_user} registered")
        return mask_password(user.to_record())

    def login(self, email: Optional[str], password: Optional[str]) -> dict:
        user = self.users.get_by_email(email) if email else None
        if user is None:
            raise NotFound("User not found")
        if not verify_password(password or "", user.password):
            raise AuthenticationFailed("Wrong password")
        return mask_password(user.to_record())

    def get_profile(self, username: Optional[str]) -> dict:
        if not username:
            raise InvalidInput("Username is required")
        user = self.users.get_by_username(username)
        if user is None:
            raise NotFound("User not found")

        return {
            "username": user.username,
            "nama": user.name,
            "photo": user.photo or "",
            "phone": user.phone or "",
            "alamat": user.address or "",
            "lahir": user.birth_date or "",
            "gender": user.gender or "",
        }

    def update_profile(self, email: Optional[str], photo: Optional[str] = None, phone: Optional[str] = None,
                       address: Optional[str] = None, birth_date: Optional[str] = None,
                       gender: Optional[str] = None) -> models.User:
        """Blank fields keep what is stored."""
        if not email:
            raise InvalidInput("Email is required to update a profile")

        def apply(user: models.User):
            if photo:
                user.photo = photo
            user.phone = phone or user.phone
            user.address = address or user.address
            user.birth_date = birth_date or user.birth_date
            user.gender = gender or user.gender

        user = self.users.update_by_email(email, apply)
        if user is None:
            raise NotFound("User not found")
        logger.info(f"Profile of {user.id_user} updated")
        return user

    def list_users(self) -> List[dict]:
        return [mask_password(u.to_record()) for u in self.users.list()]

    def delete_user(self, id_user: Optional[str]) -> None:
        if not self.users.delete(id_user):
            raise NotFound("User not found", success=False)
        logger.info(f"User {id_user} deleted")

    def register_admin(self, username: Optional[str], password: Optional[str]) -> None:
        if not username or not password:
            raise InvalidInput("Username and password are required")

        with self.admins.locked():
            if self.admins.get(username):
                raise Conflict("Admin username is already in use")
            self.admins.add(models.Admin(username=username, password=hash_password(password)))
        logger.info(f"Admin {username} registered")

    def admin_login(self, username: Optional[str], password: Optional[str]) -> None:
        admin = self.admins.get(username) if username else None
        if admin is None or not self._admin_password_matches(admin, password or ""):
            raise AuthenticationFailed("Admin login failed")

    @staticmethod
    def _admin_password_matches(admin: models.Admin, password: str) -> bool:
        if is_bcrypt_hash(admin.password):
            return verify_password(password, admin.password)
        # Accounts created before hashing was introduced
        return admin.password == password


def get_account_service(store: JsonDocumentStore = Depends(get_store)) -> AccountService:
    return AccountService(UserRepository(store), AdminRepository(store))
