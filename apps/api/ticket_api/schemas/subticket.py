from pydantic import AliasChoices, BaseModel, Field


class SubticketOut(BaseModel):
    ticket_id: int
    number: str
    subject: str
    status: str


class SubticketParentOut(BaseModel):
    parent: SubticketOut | None = None


class SubticketChildrenOut(BaseModel):
    children: list[SubticketOut] = Field(default_factory=list)


class SubticketLinkIn(BaseModel):
    parent_id: int | str | None = Field(default=None, validation_alias=AliasChoices("parent_id", "parentId", "parent"))
    child_id: int | str | None = Field(default=None, validation_alias=AliasChoices("child_id", "childId", "child"))


class SubticketLinkOut(BaseModel):
    success: bool
    message: str
    parent: SubticketOut
    child: SubticketOut


class SubticketUnlinkOut(BaseModel):
    success: bool
    message: str
    child: SubticketOut
