import logging

from videotube.db.store import DocumentStore
from videotube.services.token_service import revoke_refresh_token

logger = logging.getLogger("videotube.auth.logout")


async def logout_user(store: DocumentStore, account_id: str) -> None:
    """Clear the account's refresh-token slot. Safe to call repeatedly."""
    await revoke_refresh_token(store, account_id)
    logger.info("Account %s logged out", account_id)


__all__ = ["logout_user"]
