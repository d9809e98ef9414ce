"""Schemas for the access cookie, login flow and admin payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from termgate.core.utils.validation import MAX_ROW_ID

LOGIN_FORM_MARKER = "login"


class SessionClaim(BaseModel):
    """Decoded access cookie payload; the password is the term hash at issuance."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    term_id: StrictInt = Field(gt=0, le=MAX_ROW_ID)
    password: StrictStr = Field(min_length=1)


class LoginRedirectQuery(BaseModel):
    """Query string of the login page reached from a gate redirect."""

    model_config = ConfigDict(extra="ignore")

    return_url: str = ""
    original_post_id: Optional[int] = Field(default=None, gt=0, le=MAX_ROW_ID)
    error: Optional[str] = None

    @field_validator("original_post_id", mode="before")
    @classmethod
    def blank_post_id(cls, value):
        if value == "":
            return None
        return value


class LoginSubmission(BaseModel):
    """Form fields posted by the login form."""

    model_config = ConfigDict(extra="ignore")

    post_password: str = ""
    return_url: str = ""
    original_post_id: Optional[int] = Field(default=None, gt=0, le=MAX_ROW_ID)

    @field_validator("original_post_id", mode="before")
    @classmethod
    def blank_post_id(cls, value):
        if value == "":
            return None
        return value


class TermPasswordUpdate(BaseModel):
    """Admin payload; a null password clears the term's hash."""

    password: Optional[str] = Field(default=None, min_length=1)


class TermAssignment(BaseModel):
    """Admin payload; a null term id removes the object's term."""

    term_id: Optional[int] = Field(default=None, gt=0, le=MAX_ROW_ID)
