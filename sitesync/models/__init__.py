# SiteSync — Database Models
# Import all models here for SQLAlchemy discovery

from sitesync.models.profile import Profile                                 # noqa
from sitesync.models.organization import Organization, OrganizationMember   # noqa
from sitesync.models.site import Site                                       # noqa
from sitesync.models.log_entry import LogEntry                              # noqa
