"""Schemas for reference data and comments."""

from datetime import datetime

from pydantic import BaseModel, Field


class CourseOut(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class SubjectOut(BaseModel):
    id: int
    name: str
    course_id: int = Field(alias="courseId")

    model_config = {"populate_by_name": True, "from_attributes": True}


class DocumentTypeOut(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class CommentCreate(BaseModel):
    body: str = Field(min_length=1, max_length=5000)


class CommentOut(BaseModel):
    id: int
    resource_id: str = Field(alias="resourceId")
    user_email: str = Field(alias="userEmail")
    user_name: str = Field(alias="userName")
    body: str
    created_at: datetime = Field(alias="createdAt")

    model_config = {"populate_by_name": True, "from_attributes": True}
