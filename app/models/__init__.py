# Models module
from app.models.organization import Group, Company, Department, Role
from app.models.employee import Employee, EmployeeStatus
from app.models.attendance import Attendance, AttendanceStatus
from app.models.leave import LeaveType, LeaveApplication, LeaveStatus
from app.models.payroll import SalaryStructure, PayrollRun, PayrollStatus, payroll_run_employees
from app.models.sales import SalesData, Incentive, IncentiveStatus
from app.models.document import DocumentRecord, DocumentType, DocumentStatus

__all__ = [
    # Organization
    "Group",
    "Company",
    "Department",
    "Role",
    # People
    "Employee",
    "EmployeeStatus",
    "Attendance",
    "AttendanceStatus",
    "LeaveType",
    "LeaveApplication",
    "LeaveStatus",
    # Compensation
    "SalaryStructure",
    "PayrollRun",
    "PayrollStatus",
    "payroll_run_employees",
    "SalesData",
    "Incentive",
    "IncentiveStatus",
    # Documents
    "DocumentRecord",
    "DocumentType",
    "DocumentStatus",
]
