"""
Session guard - resolves bearer tokens to live accounts and gates on role.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .exceptions import Forbidden, InvalidToken, TokenExpired, Unauthorized
from .ports import Account, AccountRepository, Role
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass
class SessionGuard:
    """Authenticates a candidate token against the token service and repository."""

    tokens: TokenService
    repository: AccountRepository

    def authenticate(self, token: str | None) -> Account:
        """
        Resolve a token to the account it was issued for.

        Raises:
            Unauthorized: Token missing, invalid, expired, or its account is gone
        """
        if not token:
            raise Unauthorized("Not authorized, no token provided")

        try:
            account_id = self.tokens.validate(token)
        except TokenExpired as e:
            logger.info("Rejected expired token")
            raise Unauthorized("Not authorized, token expired") from e
        except InvalidToken as e:
            logger.warning("Rejected invalid token")
            raise Unauthorized("Not authorized, invalid token") from e

        account = self.repository.find_by_id(account_id)
        if account is None:
            logger.warning("Token subject no longer exists: %s", account_id)
            raise Unauthorized("Not authorized, user not found")
        return account


def require_role(account: Account, allowed: Iterable[Role]) -> Account:
    """
    Pass the account through if its role is in the allow-list.

    Raises:
        Forbidden: Role not allowed
    """
    if account.role not in set(allowed):
        raise Forbidden("You do not have permission to perform this action")
    return account
