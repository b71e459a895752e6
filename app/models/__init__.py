"""SQLAlchemy models package for the HR portal.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` or Alembic migrations run.
The import order follows the foreign-key dependency graph so that parent
tables are always registered before their children.

Usage from other modules:
    from app.models import Employee, User
"""

# Organisational hierarchy
from app.models.company import Company  # noqa: F401
from app.models.branch import Branch  # noqa: F401
from app.models.division import Division  # noqa: F401
from app.models.sub_division import SubDivision  # noqa: F401
from app.models.position import Position  # noqa: F401

# People
from app.models.employee import Employee  # noqa: F401
from app.models.employee_work_detail import EmployeeWorkDetail  # noqa: F401

# Access control
from app.models.role import Role  # noqa: F401
from app.models.master_access import MasterAccess  # noqa: F401
from app.models.role_access import RoleAccess  # noqa: F401

# Accounts
from app.models.user import User  # noqa: F401
from app.models.user_approval import UserApproval  # noqa: F401

__all__ = [
    "Company",
    "Branch",
    "Division",
    "SubDivision",
    "Position",
    "Employee",
    "EmployeeWorkDetail",
    "Role",
    "MasterAccess",
    "RoleAccess",
    "User",
    "UserApproval",
]
