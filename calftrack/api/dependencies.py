"""Request Dependencies — acting identity and per-request service wiring.

Invariants:
    - Every service gets the request's AsyncSession (get_db); services own commits
    - Acting identity prefers verified token claims over the trusted header

Design Decisions:
    - Token verification lives upstream (gateway/middleware) and leaves its
      claims on request.state.auth_claims; this module only reads them
    - Catalog-only master data also enables fuzzy matching, so spreadsheet
      spellings still resolve to an existing breed/seller
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from calftrack.config import get_settings
from calftrack.core.acting_identity import identity_from_claims
from calftrack.infrastructure.database import get_db
from calftrack.services.calf_ledger import CalfLedger
from calftrack.services.name_registry import (
    MasterDataResolver,
    NameRegistry,
    breed_registry,
    seller_registry,
)
from calftrack.services.ranch_service import RanchService
from calftrack.services.reporting import ReportingService
from calftrack.services.transfer_engine import TransferEngine


def caller_identity(request: Request) -> str | None:
    """Display name of the caller, or None when anonymous."""
    claims = getattr(request.state, "auth_claims", None)
    name = identity_from_claims(claims)
    if name:
        return name
    header = request.headers.get(get_settings().acting_user_header, "").strip()
    return header or None


def get_ranch_service(db: AsyncSession = Depends(get_db)) -> RanchService:
    return RanchService(db)


def get_breed_registry(db: AsyncSession = Depends(get_db)) -> NameRegistry:
    return breed_registry(db)


def get_seller_registry(db: AsyncSession = Depends(get_db)) -> NameRegistry:
    return seller_registry(db)


def get_calf_ledger(db: AsyncSession = Depends(get_db)) -> CalfLedger:
    catalog_only = get_settings().catalog_only_master_data
    resolver = MasterDataResolver(
        db, allow_create=not catalog_only, fuzzy=catalog_only,
    )
    return CalfLedger(db, resolver)


def get_transfer_engine(db: AsyncSession = Depends(get_db)) -> TransferEngine:
    return TransferEngine(db)


def get_reporting(db: AsyncSession = Depends(get_db)) -> ReportingService:
    return ReportingService(db)
