from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime

Reference = int | str


class TicketCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=255)
    subject: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    format: str | None = None
    department: Reference | None = Field(default=None, validation_alias=AliasChoices("department", "departmentId"))
    topic: Reference | None = Field(default=None, validation_alias=AliasChoices("topic", "topicId"))
    parent_ticket_number: Reference | None = Field(
        default=None, validation_alias=AliasChoices("parent_ticket_number", "parentTicketNumber")
    )
    due_date: str | None = Field(default=None, validation_alias=AliasChoices("due_date", "dueDate"))
    source: str | None = None


class TicketUpdateIn(BaseModel):
    department: Reference | None = Field(default=None, validation_alias=AliasChoices("department", "departmentId"))
    topic: Reference | None = Field(default=None, validation_alias=AliasChoices("topic", "topicId"))
    status: Reference | None = Field(default=None, validation_alias=AliasChoices("status", "statusId"))
    sla: Reference | None = Field(default=None, validation_alias=AliasChoices("sla", "slaId"))
    staff: Reference | None = Field(default=None, validation_alias=AliasChoices("staff", "staffId"))
    parent_ticket_number: Reference | None = Field(
        default=None, validation_alias=AliasChoices("parent_ticket_number", "parentTicketNumber")
    )
    due_date: str | None = Field(default=None, validation_alias=AliasChoices("due_date", "dueDate"))
    note: str | None = None
    note_title: str | None = Field(default=None, validation_alias=AliasChoices("note_title", "noteTitle"))
    note_format: str | None = Field(default=None, validation_alias=AliasChoices("note_format", "noteFormat"))


class TicketCreatedOut(BaseModel):
    id: int
    number: str


class TicketUpdatedOut(BaseModel):
    id: int
    number: str
    subject: str
    department_id: int | None = None
    topic_id: int | None = None
    status_id: int | None = None
    sla_id: int | None = None
    staff_id: int | None = None
    parent_id: int | None = None
    due_date: datetime | None = None
    updated: datetime | None = None


class TicketSearchItemOut(BaseModel):
    id: int
    number: str
    subject: str
    status_id: int | None = None
    status: str | None = None
    priority_id: int | None = None
    priority: str | None = None
    department_id: int | None = None
    department: str | None = None
    topic_id: int | None = None
    topic: str | None = None
    created: datetime | None = None
    updated: datetime | None = None
    due_date: datetime | None = None
    staff_id: int | None = None
    staff: str | None = None
    team_id: int | None = None
    team: str | None = None
    sla_id: int | None = None
    sla: str | None = None
    is_overdue: bool = False
    is_answered: bool = False


class ThreadEntryOut(BaseModel):
    id: int
    type: str
    poster: str | None = None
    title: str | None = None
    format: str | None = None
    timestamp: datetime | None = None
    body: str
    staff_id: int | None = None
    user: str | None = None


class TicketUserOut(BaseModel):
    name: str | None = None
    email: str | None = None


class TicketOut(TicketSearchItemOut):
    user: TicketUserOut
    closed: datetime | None = None
    source: str | None = None
    ip: str | None = None
    parent_id: int | None = None
    children: list[int] = Field(default_factory=list)
    thread: list[ThreadEntryOut] = Field(default_factory=list)


class TicketDeletedOut(BaseModel):
    number: str


class TicketStatusOut(BaseModel):
    id: int
    name: str
    state: str

    class Config:
        from_attributes = True
