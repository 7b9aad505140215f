# sitesync/routers/sites.py
"""Site administration endpoints — list, create, rename, delete, QR lookup."""

from fastapi import APIRouter, Depends
from sitesync.dependencies import get_current_user, get_repository
from sitesync.schemas.site import SiteCreate, SiteOut, SiteUpdate
from sitesync.services import site_service
from sitesync.services.records import CurrentUser
from sitesync.services.repository import LogbookRepository

router = APIRouter()


@router.get("/sites", response_model=list[SiteOut], summary="List sites")
def list_sites(repo: LogbookRepository = Depends(get_repository)):
    return site_service.list_sites(repo)


@router.get("/sites/lookup/{qr_code}", response_model=SiteOut, summary="Resolve a scanned QR code")
def lookup_site(qr_code: str, repo: LogbookRepository = Depends(get_repository)):
    """Called right after a scan to show the site before the check-in form."""
    return site_service.lookup_by_qr_code(repo, qr_code)


@router.get("/sites/{site_id}", response_model=SiteOut, summary="Get one site")
def get_site(site_id: str, repo: LogbookRepository = Depends(get_repository)):
    return site_service.get_site(repo, site_id)


@router.post("/sites", response_model=SiteOut, status_code=201, summary="Create a site (admin)")
def create_site(
    body: SiteCreate,
    user: CurrentUser = Depends(get_current_user),
    repo: LogbookRepository = Depends(get_repository),
):
    return site_service.create_site(repo, user, body.name, body.address, body.qr_code)


@router.put("/sites/{site_id}", response_model=SiteOut, summary="Rename / move a site (admin)")
def update_site(
    site_id: str,
    body: SiteUpdate,
    user: CurrentUser = Depends(get_current_user),
    repo: LogbookRepository = Depends(get_repository),
):
    """Historical log entries keep the site name they were created with."""
    return site_service.update_site(repo, user, site_id, body.name, body.address)


@router.delete("/sites/{site_id}", summary="Delete a site (admin)")
def delete_site(
    site_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: LogbookRepository = Depends(get_repository),
):
    site_service.delete_site(repo, user, site_id)
    return {"id": site_id, "status": "deleted"}
