import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from ..common.db import new_id
from ..common.enums import Role
from ..common.errors import Conflict, InvalidRequest
from ..common.unit_of_work import UnitOfWorkFactory, guarded
from ..users.entity import User
from .security import TokenService, hash_password, verify_password

_logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, uow_factory: UnitOfWorkFactory, tokens: TokenService, tx_timeout: float):
        self._uow_factory = uow_factory
        self._tokens = tokens
        self._tx_timeout = tx_timeout

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        address: str,
        phone: str,
        country: Optional[str] = None,
        city: Optional[str] = None,
        role: Role = Role.USER,
    ) -> Dict[str, Any]:
        """Create the credential and the user in one transaction."""

        async def _work():
            async with self._uow_factory() as uow:
                if await uow.credentials.get_by_email(email) is not None:
                    raise Conflict("Email already registered")
                try:
                    credential_id = await uow.credentials.add(email, hash_password(password))
                    user = await uow.users.add(
                        User(
                            id=new_id(),
                            email=email,
                            name=name,
                            address=address,
                            phone=phone,
                            country=country,
                            city=city,
                            role=role,
                            credential_id=credential_id,
                        )
                    )
                    await uow.commit()
                except IntegrityError:
                    raise Conflict("User with this email or phone already exists.")
            _logger.info("User registered | user_id=%s role=%s", user.id, user.role.value)
            return {"user": user, "token": self._tokens.issue(user.id, user.role)}

        return await guarded(_work(), self._tx_timeout, "Fail to register new user")

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        async def _work():
            async with self._uow_factory() as uow:
                credential = await uow.credentials.get_by_email(email)
                if credential is None or not verify_password(password, credential.password):
                    raise InvalidRequest("Invalid email or password")
                user = await uow.users.get_by_credential_id(credential.id)
            if user is None:
                raise InvalidRequest("Invalid email or password")
            return {"token": self._tokens.issue(user.id, user.role), "user": user}

        return await guarded(_work(), self._tx_timeout, "Fail to login user")
