from pydantic import BaseModel, Field


class DepartmentCountsOut(BaseModel):
    total: int = 0
    open: int = 0
    closed: int = 0
    overdue: int = 0


class StaffDepartmentCountsOut(BaseModel):
    open: int = 0
    closed: int = 0
    overdue: int = 0


class StaffStatsOut(BaseModel):
    staff_id: int
    staff_name: str
    total: int = 0
    departments: dict[str, StaffDepartmentCountsOut] = Field(default_factory=dict)


class TicketStatsOut(BaseModel):
    total: int
    open: int
    closed: int
    overdue: int
    by_department: dict[str, DepartmentCountsOut] = Field(default_factory=dict)
    by_staff: list[StaffStatsOut] = Field(default_factory=list)
