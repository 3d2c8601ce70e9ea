"""Shared dependencies for API endpoints.

Authorization runs as a route dependency: the handler only executes once
``authorize`` has resolved the bearer token and checked its roles. Routes
declare what they need through the Annotated aliases at the bottom:

    StaffPrincipal          admin or employee
    AdminPrincipal          admin only
    AuthenticatedPrincipal  any verified token
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.authorization import authorize
from stockroom.core.database import get_db
from stockroom.core.pagination import Pagination, pagination_params
from stockroom.providers.factory import get_identity_provider
from stockroom.providers.identity.base import IdentityProvider
from stockroom.schemas.auth import Principal, Role


def get_identity_provider_dep() -> IdentityProvider:
    """Dependency wrapper around the provider factory.

    Tests replace it through ``app.dependency_overrides``.
    """
    return get_identity_provider()


Identity = Annotated[IdentityProvider, Depends(get_identity_provider_dep)]


def require_roles(*roles: Role) -> Callable[[Request, IdentityProvider], Awaitable[Principal]]:
    """Build a dependency that admits principals holding any of roles.

    With no roles, any authenticated principal is admitted.

    Args:
        *roles: Roles accepted by the route.

    Returns:
        Async dependency returning the authorized Principal.
    """
    required = frozenset(role.value for role in roles)

    async def dependency(request: Request, identity: Identity) -> Principal:
        return await authorize(request, identity, required)

    return dependency


DbSession = Annotated[AsyncSession, Depends(get_db)]
Paging = Annotated[Pagination, Depends(pagination_params)]

StaffPrincipal = Annotated[Principal, Depends(require_roles(Role.ADMIN, Role.EMPLOYEE))]
AdminPrincipal = Annotated[Principal, Depends(require_roles(Role.ADMIN))]
AuthenticatedPrincipal = Annotated[Principal, Depends(require_roles())]
