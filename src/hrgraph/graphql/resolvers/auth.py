from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ..errors import translate_errors

if TYPE_CHECKING:
    from ...services import Services
    from ..types.account import User


def get_services(info: strawberry.Info) -> Services:
    return info.context["services"]


@translate_errors
async def login(
    info: strawberry.Info, username: str | None, email: str | None, password: str
) -> str:
    return await get_services(info).auth.login(username=username, email=email, password=password)


@translate_errors
async def signup(info: strawberry.Info, username: str, email: str, password: str) -> User:
    from ..types.account import User as UserType

    account = await get_services(info).auth.signup(username, email, password)
    return UserType.from_domain(account)
