import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from ..common.enums import Role
from ..common.errors import Conflict, NotFound, OperationFailed
from ..common.pagination import page_dict
from ..common.unit_of_work import UnitOfWorkFactory, guarded
from .entity import User

_logger = logging.getLogger(__name__)

_EDITABLE = ("email", "name", "address", "phone", "country", "city")


class UserService:
    def __init__(self, uow_factory: UnitOfWorkFactory, tx_timeout: float):
        self._uow_factory = uow_factory
        self._tx_timeout = tx_timeout

    async def list_users(self, page: int, limit: int) -> Dict[str, Any]:
        async def _work():
            async with self._uow_factory() as uow:
                users, total = await uow.users.list(page, limit)
            return page_dict(users, total, page, limit)

        return await guarded(_work(), self._tx_timeout, "Failed to retrieve users")

    async def get_user(self, user_id: str) -> User:
        async def _work():
            async with self._uow_factory() as uow:
                return await self._load(uow, user_id)

        return await guarded(_work(), self._tx_timeout, "Failed to retrieve user")

    async def update_user(self, user_id: str, changes: Dict[str, Optional[str]]) -> User:
        """Apply the non-empty profile fields in ``changes``."""

        async def _work():
            async with self._uow_factory() as uow:
                user = await self._load(uow, user_id)
                for key in _EDITABLE:
                    if changes.get(key) is not None:
                        setattr(user, key, changes[key])
                try:
                    user = await uow.users.save(user)
                    await uow.commit()
                except IntegrityError:
                    raise Conflict("User with this email already exists.")
            return user

        return await guarded(_work(), self._tx_timeout, f"Fail to update user with ID {user_id}")

    async def delete_user(self, user_id: str) -> User:
        async def _work():
            async with self._uow_factory() as uow:
                user = await self._load(uow, user_id)
                if await uow.users.soft_delete(user_id) == 0:
                    raise OperationFailed(f"Fail to delete user with ID {user_id}")
                await uow.commit()
            _logger.info("User deleted | user_id=%s", user_id)
            return user

        return await guarded(_work(), self._tx_timeout, f"Fail to delete user with ID {user_id}")

    async def promote_to_admin(self, user_id: str) -> User:
        async def _work():
            async with self._uow_factory() as uow:
                user = await self._load(uow, user_id)
                user.role = Role.ADMIN
                user = await uow.users.save(user)
                await uow.commit()
            _logger.info("User promoted | user_id=%s role=%s", user_id, user.role.value)
            return user

        return await guarded(_work(), self._tx_timeout, "Failed to upgrade user role to admin")

    @staticmethod
    async def _load(uow, user_id: str) -> User:
        user = await uow.users.get(user_id)
        if user is None:
            raise NotFound(f"User with ID {user_id} not found")
        return user
