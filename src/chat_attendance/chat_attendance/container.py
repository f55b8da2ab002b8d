from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import SessionTracker
from .core.constants import DEFAULT_DISPLAY_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeDirectory
from .geofence.service import LocationService
from .geofence.validator import GeofenceValidator
from .leave.mysql_leave_repository import MySQLLeaveRequestRepository
from .leave.parser import LeaveCommandParser
from .leave.service import LeaveWorkflow
from .messaging.router import MessageRouter
from .reports.service import WeeklyAggregator
from .sites.mysql_site_repository import MySQLSiteRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    sites_repo: MySQLSiteRepository
    attendance_repo: MySQLAttendanceRepository
    leave_repo: MySQLLeaveRequestRepository

    directory: EmployeeDirectory
    location_service: LocationService
    session_tracker: SessionTracker
    leave_workflow: LeaveWorkflow
    weekly_aggregator: WeeklyAggregator
    message_router: MessageRouter


def build_container(*, db_config: dict, display_timezone: str = DEFAULT_DISPLAY_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    sites_repo = MySQLSiteRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRequestRepository(conn)

    parser = LeaveCommandParser()
    directory = EmployeeDirectory(employees_repo)
    location_service = LocationService(sites_repo, GeofenceValidator())
    session_tracker = SessionTracker(attendance_repo, display_timezone=display_timezone)
    leave_workflow = LeaveWorkflow(leave_repo, employees_repo, directory=directory, parser=parser)
    weekly_aggregator = WeeklyAggregator(attendance_repo, leave_repo, employees_repo)
    message_router = MessageRouter(
        directory=directory,
        tracker=session_tracker,
        locations=location_service,
        leave=leave_workflow,
        reports=weekly_aggregator,
        parser=parser,
        display_timezone=display_timezone,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        sites_repo=sites_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        directory=directory,
        location_service=location_service,
        session_tracker=session_tracker,
        leave_workflow=leave_workflow,
        weekly_aggregator=weekly_aggregator,
        message_router=message_router,
    )
