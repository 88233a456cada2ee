"""Premium subscription oracle.

The subscription contract is the single source of truth for premium status.
Reads go through ``web3``; any failure degrades to the free tier rather than
to unlimited access. Successful reads are mirrored into the ``users`` table
for display and audit only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Final

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from web3 import AsyncWeb3

from hooklab.core.settings import settings
from hooklab.db.time import from_unix, utcnow
from hooklab.models import User
from hooklab.services.quota import normalize_wallet

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_PRICE_WEI: Final[int] = 10**15  # 0.001 ether

HOOKLAB_SUBSCRIPTION_ABI: Final[list[dict[str, Any]]] = [
    {
        "type": "function",
        "name": "subscribeMonthly",
        "inputs": [],
        "outputs": [],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "isPremium",
        "inputs": [{"name": "user", "type": "address"}],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "getExpiry",
        "inputs": [{"name": "user", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "MONTHLY_PRICE",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Subscribed",
        "anonymous": False,
        "inputs": [
            {"name": "user", "type": "address", "indexed": True},
            {"name": "expiry", "type": "uint256", "indexed": False},
            {"name": "amount", "type": "uint256", "indexed": False},
        ],
    },
]


class OracleError(RuntimeError):
    """Raised when the subscription contract cannot be read."""


@dataclass(frozen=True)
class PremiumStatus:
    """Result of reading a wallet's subscription state."""

    wallet_address: str
    is_premium: bool
    expiry_timestamp: int
    read_ok: bool = True

    @property
    def expiry_date(self) -> str | None:
        """ISO-8601 expiry, or None when the wallet never subscribed."""
        expiry = from_unix(self.expiry_timestamp)
        return expiry.isoformat() if expiry else None


def format_expiry_date(timestamp: int, *, now: datetime | None = None) -> str:
    """Render an expiry timestamp for display."""
    if timestamp == 0:
        return "Never subscribed"

    expiry = datetime.fromtimestamp(timestamp, UTC)
    if expiry < (now or utcnow()):
        return "Expired"
    return f"{expiry:%B} {expiry.day}, {expiry.year}"


def is_expiry_active(timestamp: int, *, now: datetime | None = None) -> bool:
    """Return True if the expiry lies in the future. Display use only."""
    if timestamp == 0:
        return False
    current = int((now or utcnow()).timestamp())
    return timestamp > current


class PremiumOracle:
    """Read-only view of the subscription contract."""

    def __init__(
        self,
        *,
        rpc_url: str | None = None,
        contract_address: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.rpc_url = rpc_url or settings.chain_rpc_url
        self.contract_address = contract_address or settings.subscription_contract_address
        self.timeout_seconds = timeout_seconds or settings.http_timeout_seconds
        self._w3: AsyncWeb3 | None = None
        self._contract: Any = None

    @property
    def enabled(self) -> bool:
        return bool(self.contract_address)

    def _get_contract(self) -> Any:
        if not self.enabled:
            raise OracleError("SUBSCRIPTION_CONTRACT_ADDRESS is not configured")

        if self._contract is None:
            self._w3 = AsyncWeb3(
                AsyncWeb3.AsyncHTTPProvider(
                    self.rpc_url,
                    request_kwargs={"timeout": self.timeout_seconds},
                )
            )
            try:
                address = AsyncWeb3.to_checksum_address(self.contract_address)
            except ValueError as exc:
                raise OracleError(f"Invalid contract address: {self.contract_address}") from exc
            self._contract = self._w3.eth.contract(address=address, abi=HOOKLAB_SUBSCRIPTION_ABI)
        return self._contract

    async def _call(self, function_name: str, *args: Any) -> Any:
        contract = self._get_contract()
        try:
            return await getattr(contract.functions, function_name)(*args).call()
        except Exception as exc:
            # web3 surfaces transport, ABI and revert failures with unrelated types.
            raise OracleError(f"{function_name} read failed: {exc}") from exc

    @staticmethod
    def _checksum(address: str) -> str:
        try:
            return AsyncWeb3.to_checksum_address(address.strip())
        except ValueError as exc:
            raise OracleError(f"Invalid wallet address: {address}") from exc

    async def is_premium_active(self, address: str) -> bool:
        """Return the contract's premium flag for a wallet."""
        return bool(await self._call("isPremium", self._checksum(address)))

    async def expiry(self, address: str) -> int:
        """Return the subscription expiry as a unix timestamp, 0 if never subscribed."""
        return int(await self._call("getExpiry", self._checksum(address)))

    async def monthly_price(self) -> int:
        """Return the monthly subscription price in wei."""
        try:
            return int(await self._call("MONTHLY_PRICE"))
        except OracleError as exc:
            logger.warning("Falling back to default monthly price: %s", exc)
            return DEFAULT_MONTHLY_PRICE_WEI

    async def check(self, address: str) -> PremiumStatus:
        """Read flag and expiry independently, defaulting each to the free tier."""
        read_ok = True
        try:
            is_premium = await self.is_premium_active(address)
        except OracleError as exc:
            logger.warning("Premium read failed for %s: %s", address, exc)
            is_premium = False
            read_ok = False

        try:
            expiry = await self.expiry(address)
        except OracleError as exc:
            logger.warning("Expiry read failed for %s: %s", address, exc)
            expiry = 0
            read_ok = False

        return PremiumStatus(
            wallet_address=normalize_wallet(address),
            is_premium=is_premium,
            expiry_timestamp=expiry,
            read_ok=read_ok,
        )


def get_or_create_user(db: Session, wallet_address: str) -> User:
    """Return the premium record for a wallet, creating it if absent."""
    wallet = normalize_wallet(wallet_address)
    user = db.query(User).filter(User.wallet_address == wallet).first()
    if user is None:
        user = User(wallet_address=wallet)
        db.add(user)
        db.flush()
    return user


def mirror_premium_status(db: Session, status: PremiumStatus) -> User:
    """Copy an on-chain read into the advisory premium record."""
    try:
        user = get_or_create_user(db, status.wallet_address)
        user.is_premium = status.is_premium
        user.premium_expiry = from_unix(status.expiry_timestamp)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return user


class _PremiumOracleSingleton:
    """Singleton wrapper for PremiumOracle."""

    _instance: PremiumOracle | None = None

    @classmethod
    def get_instance(cls) -> PremiumOracle:
        """Get or create the singleton PremiumOracle instance."""
        if cls._instance is None:
            cls._instance = PremiumOracle()
        return cls._instance


def get_premium_oracle() -> PremiumOracle:
    """Return a singleton premium oracle instance."""
    return _PremiumOracleSingleton.get_instance()
