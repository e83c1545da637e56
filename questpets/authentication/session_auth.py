import logging
from typing import Protocol

from sqlalchemy.ext.asyncio import async_sessionmaker

from questpets.crud import ReadData, UpdateData


class SessionVerifier(Protocol):
    async def verify_session(self, session_id: str) -> str | None:
        """Return the account id holding the session, None if the session is invalid."""
        ...


class BalanceHook(Protocol):
    async def credit_reward(self, account_id: str, amount: float) -> None:
        ...


class AccountSessionVerifier:
    """Resolve session tokens against the accounts table.

    Session issuing and expiry belong to the account use cases; this only
    looks up who currently holds a token.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def verify_session(self, session_id: str) -> str | None:
        if not session_id:
            return None
        async with self._session_factory() as session:
            account = await ReadData.read_account_by_session(session_id, session)
        if account is None:
            return None
        return account.account_id


class NoopBalanceHook:
    """Leaves balances untouched. Rewards are recorded but not paid out."""

    async def credit_reward(self, account_id: str, amount: float) -> None:
        logging.debug(f"Reward crediting disabled, skipped {amount} for {account_id}")


class AccountBalanceHook:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def credit_reward(self, account_id: str, amount: float) -> None:
        if amount <= 0:
            return
        async with self._session_factory() as session:
            success = await UpdateData.update_balance(account_id, amount, session)
        if not success:
            logging.error(f"Reward {amount} was not credited to {account_id}")
