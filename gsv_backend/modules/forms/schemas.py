from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime

FieldType = Literal[
    "text", "textarea", "email", "number", "date", "select", "radio",
    "multiselect", "checkbox", "file", "rating",
]
Condition = Literal["equals", "not_equals", "contains", "not_contains", "greater_than", "less_than"]
FormStatus = Literal["draft", "published", "closed"]
FormTemplate = Literal["basic", "volunteer_registration", "event_feedback"]


class FieldValidation(BaseModel):
    min_length: Optional[int] = Field(default=None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=1)
    pattern: Optional[str] = None
    custom_message: Optional[str] = Field(default=None, alias="customMessage")

    class Config:
        populate_by_name = True


class ConditionalLogic(BaseModel):
    depends_on: str = Field(alias="dependsOn")
    condition: Condition
    value: Any = None

    class Config:
        populate_by_name = True


class FormField(BaseModel):
    key: Optional[str] = None  # derived from the title when omitted
    title: str = Field(min_length=1)
    field_type: FieldType = "text"
    required: bool = False
    options: Optional[List[str]] = None
    validation: Optional[FieldValidation] = None
    conditional_logic: Optional[ConditionalLogic] = None
    column_index: Optional[int] = None


class FormCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = ""
    template: FormTemplate = "basic"


class FormUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[FormStatus] = None
    settings: Optional[Dict[str, Any]] = None
    fields: Optional[List[FormField]] = None


class FormResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: str
    settings: Optional[Dict[str, Any]] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    fields: List[FormField] = []
    response_count: int = 0

    class Config:
        from_attributes = True


class SubmissionCreate(BaseModel):
    responses: Dict[str, Any]


class SubmissionResponse(BaseModel):
    id: str
    form_id: str
    responses: Dict[str, Any]
    submitted_by: Optional[str] = None
    submitted_at: Optional[datetime] = None


class SubmissionPage(BaseModel):
    ok: bool = True
    responses: List[SubmissionResponse]
    total: int
    offset: int
    limit: int


class SubmissionResult(BaseModel):
    ok: bool = True
    message: str
    response_id: str
