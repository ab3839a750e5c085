from .auth import *
from .organization import (
    OrganizationCreate,
    OrganizationUpdate,
    Organization,
    OrganizationMember,
    OrganizationInviteCreate,
    OrganizationInvite,
)
from .project import *
from .task import *
from .unit import *
from .media import *
from .daily_report import *
from .log import *
from .note import *
from .supply import *
from .dashboard import *
from .notification import *
