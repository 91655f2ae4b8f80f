# Services module
from app.services.attendance_service import AttendanceService
from app.services.leave_service import LeaveService
from app.services.payroll_service import PayrollService
from app.services.sales_service import SalesService
from app.services.document_service import DocumentService
from app.services.employee_service import EmployeeService
from app.services.organization_service import OrganizationService
from app.services.sync_service import SyncService

__all__ = [
    "AttendanceService",
    "LeaveService",
    "PayrollService",
    "SalesService",
    "DocumentService",
    "EmployeeService",
    "OrganizationService",
    "SyncService",
]
