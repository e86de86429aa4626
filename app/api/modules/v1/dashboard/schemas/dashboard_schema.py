from datetime import date, datetime
from typing import Dict, List

from pydantic import BaseModel

from app.api.modules.v1.projects.models.project_model import Priority
from app.api.modules.v1.work_items.models.work_item_model import WorkItemStatus


class RecentWorkItem(BaseModel):
    id: int
    name: str
    status: WorkItemStatus
    priority: Priority
    project_id: int
    project_name: str
    assigned_to_id: str
    assignee_name: str
    updated_at: datetime


class UpcomingDeadline(BaseModel):
    id: int
    name: str
    status: WorkItemStatus
    project_name: str
    assignee_name: str
    deadline: datetime
    days_remaining: int


class PerformancePoint(BaseModel):
    date: date
    performance: float


class ManagerDashboardResponse(BaseModel):
    total_projects: int
    active_projects: int
    closed_projects: int
    total_work_items: int
    work_items_by_status: Dict[str, int]
    overdue_work_items: int
    due_soon_work_items: int
    total_employees: int
    employees_by_workload: Dict[str, int]
    average_performance: float
    average_workload: float
    recent_work_items: List[RecentWorkItem]
    upcoming_deadlines: List[UpcomingDeadline]


class EmployeeDashboardResponse(BaseModel):
    full_name: str
    performance: float
    workload: float
    skills: List[str]
    experience: int
    accepted_items_count: int
    total_work_items: int
    work_items_by_status: Dict[str, int]
    overdue_work_items: int
    due_soon_work_items: int
    recent_work_items: List[RecentWorkItem]
    upcoming_deadlines: List[UpcomingDeadline]
    performance_history: List[PerformancePoint]
