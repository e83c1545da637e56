from pydantic import BaseModel, computed_field


class TaskSchema(BaseModel):
    name: str
    reward: float

    class Config:
        from_attributes = True


class ActiveTaskSchema(BaseModel):
    name: str
    reward: float
    timestamp: str

    class Config:
        from_attributes = True

    @computed_field
    @property
    def updated_on(self) -> str:
        return self.timestamp[:10]


class CompletionRecordSchema(BaseModel):
    id: str
    account_id: str
    timestamp: str
    task: str
    image: str

    class Config:
        from_attributes = True


class AccountSchema(BaseModel):
    account_id: str
    username: str
    session_id: str | None = None
    balance: float = 0.0

    class Config:
        from_attributes = True
