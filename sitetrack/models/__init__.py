from .profile import Profile
from .organization import Organization, OrganizationMember, OrganizationInvite
from .project import Project
from .task import Task
from .unit import UnitProgress, UnitPermission
from .daily_report import DailyReport
from .log import LogEntry
from .note import Note, NoteReply
from .supply import SupplyOrder, SupplyComment
from .media import ProjectDocument, ProjectPhoto
from .notification import Notification
