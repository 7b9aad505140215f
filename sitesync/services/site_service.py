# sitesync/services/site_service.py
"""
Site administration — create, rename, delete and QR token lookup.
Creating, updating and deleting sites is restricted to admins / owners.

Renaming a site never touches historical log entries: they keep the name
that was current at check-in. Deleting a site keeps its entries as well.
"""

import re
import time
import uuid
from typing import Optional

from sitesync.services.errors import DuplicateQrCode, InvalidInput, PermissionDenied, SiteNotFound
from sitesync.services.records import CurrentUser, SiteRecord
from sitesync.services.repository import LogbookRepository
from sitesync.utils.time_utils import utcnow
from sitesync.utils.logger import get_logger

logger = get_logger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_MAX_TOKEN_ATTEMPTS = 5


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_qr_code(site_name: str, millis: Optional[int] = None) -> str:
    """site_<name with whitespace as underscores>_<base36 epoch millis>"""
    slug = re.sub(r"\s+", "_", site_name.strip().lower())
    if millis is None:
        millis = int(time.time() * 1000)
    return f"site_{slug}_{_base36(millis)}"


def _require_admin(user: CurrentUser):
    if not user.can_manage_sites:
        raise PermissionDenied("Only administrators can manage sites")


def _required(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidInput(f"{label} is required")
    return value


def list_sites(repo: LogbookRepository) -> list[SiteRecord]:
    return repo.list_sites()


def get_site(repo: LogbookRepository, site_id: str) -> SiteRecord:
    site = repo.find_site_by_id(site_id)
    if site is None:
        raise SiteNotFound(f"Site {site_id} not found")
    return site


def lookup_by_qr_code(repo: LogbookRepository, qr_code: str) -> SiteRecord:
    """Resolve a scanned token before showing the check-in form."""
    token = (qr_code or "").strip()
    if not token:
        raise InvalidInput("QR code is required")
    site = repo.find_site_by_qr_code(token)
    if site is None:
        raise SiteNotFound("Invalid QR code. Site not found.")
    return site


def create_site(
    repo: LogbookRepository,
    user: CurrentUser,
    name: str,
    address: str,
    qr_code: Optional[str] = None,
) -> SiteRecord:
    """
    Create a site. A QR token is generated from the name unless the caller
    supplies one (e.g. a pre-printed label). Tokens are unique per organization.
    """
    _require_admin(user)
    name = _required(name, "Site name")
    address = _required(address, "Site address")

    if qr_code is not None:
        token = _required(qr_code, "QR code")
        if repo.find_site_by_qr_code(token) is not None:
            raise DuplicateQrCode(f"QR code {token!r} is already assigned to another site")
    else:
        millis = int(time.time() * 1000)
        for attempt in range(_MAX_TOKEN_ATTEMPTS):
            token = generate_qr_code(name, millis + attempt)
            if repo.find_site_by_qr_code(token) is None:
                break
        else:
            raise DuplicateQrCode(f"Could not generate a unique QR code for {name!r}")

    now = utcnow()
    site = SiteRecord(
        id=str(uuid.uuid4()),
        name=name,
        address=address,
        qr_code=token,
        created_by=user.id,
        created_at=now,
        updated_at=now,
    )
    repo.add_site(site)
    logger.info(f"[SITES] Created {name!r} qr={token} by {user.name}")
    return site


def update_site(
    repo: LogbookRepository,
    user: CurrentUser,
    site_id: str,
    name: Optional[str] = None,
    address: Optional[str] = None,
) -> SiteRecord:
    """Change name and/or address. The QR token stays the same."""
    _require_admin(user)
    site = get_site(repo, site_id)
    if name is not None:
        site.name = _required(name, "Site name")
    if address is not None:
        site.address = _required(address, "Site address")
    site.updated_at = utcnow()
    if not repo.replace_site(site):
        raise SiteNotFound(f"Site {site_id} not found")
    logger.info(f"[SITES] Updated {site_id} → name={site.name!r}")
    return site


def delete_site(repo: LogbookRepository, user: CurrentUser, site_id: str) -> None:
    _require_admin(user)
    if not repo.delete_site(site_id):
        raise SiteNotFound(f"Site {site_id} not found")
    logger.warning(f"[SITES] Deleted site {site_id} by {user.name} — existing log entries kept")
