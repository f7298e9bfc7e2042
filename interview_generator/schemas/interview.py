from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

from interview_generator.core.config import settings
from interview_generator.core.constants import COMPANY_SIZE_PATTERN, EXPERIENCE_RANGE_PATTERN

# --- Domain Models ---

class Interview(BaseModel):
    """One generated interview: a role/industry pair and five standard questions."""
    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="Job role being interviewed (e.g., 'Software Engineer').")
    industry: str = Field(..., description="Industry sector (e.g., 'Technology, Information and Internet').")
    question_one: str = Field(..., description="Day in the life: daily responsibilities and workflow.")
    question_two: str = Field(..., description="Pain points: current challenges and frustrations.")
    question_three: str = Field(..., description="Existing solutions: tools and approaches in use.")
    question_four: str = Field(..., description="Impact: how the challenges affect work and objectives.")
    question_five: str = Field(..., description="Ideal solution: vision for a perfect resolution.")


class Profile(BaseModel):
    """
    The ideal customer profile collected by the form.
    Immutable once submitted; consumed once by the checkout initiator.
    """
    model_config = ConfigDict(frozen=True)

    role: str
    industry: str
    experience_range: str = Field(..., pattern=EXPERIENCE_RANGE_PATTERN)
    company_size_range: str = Field(..., pattern=COMPANY_SIZE_PATTERN)
    desired_count: int = Field(
        default=settings.DEFAULT_INTERVIEW_COUNT,
        ge=settings.MIN_INTERVIEW_COUNT,
        le=settings.MAX_INTERVIEW_COUNT,
    )

    @property
    def estimated_minutes(self) -> int:
        """Rough generation time shown next to the interview count."""
        return self.desired_count * settings.MINUTES_PER_INTERVIEW


# --- Payment Boundary Models ---

class CheckoutRequest(BaseModel):
    """Wire body of POST /api/checkout."""
    role: str = ""
    industry: str = ""
    range: str = ""
    employee_range: str = ""
    interviews: int = Field(
        default=settings.DEFAULT_INTERVIEW_COUNT,
        ge=settings.MIN_INTERVIEW_COUNT,
        le=settings.MAX_INTERVIEW_COUNT,
    )
    returnUrl: str = ""

    @classmethod
    def from_profile(cls, profile: Profile, return_url: str) -> "CheckoutRequest":
        return cls(
            role=profile.role,
            industry=profile.industry,
            range=profile.experience_range,
            employee_range=profile.company_size_range,
            interviews=profile.desired_count,
            returnUrl=return_url,
        )


class CheckoutSession(BaseModel):
    """A redirectable payment session returned by the payment boundary."""
    id: str = Field(..., min_length=1, description="Opaque Stripe checkout session token.")
    url: Optional[str] = Field(default=None, description="Hosted checkout page to redirect to.")


# --- Job Boundary Models ---

class JobResponse(BaseModel):
    """Response of the job start endpoint."""
    jobId: str = Field(..., min_length=1)


class JobStatus(BaseModel):
    """Response of the job status endpoint."""
    status: Literal["pending", "completed", "failed"]
    data: Optional[list[Interview]] = Field(default=None, description="Present when completed.")
    error: Optional[str] = Field(default=None, description="Present when failed.")
    progress: Optional[int] = Field(default=None, ge=0, le=100, description="Percent complete while pending.")

    @property
    def is_terminal(self) -> bool:
        return self.status in ("completed", "failed")


# --- Export Models ---

class ExportedFile(BaseModel):
    """A named byte payload produced by the export boundary."""
    content: bytes
    filename: str
    media_type: str = "application/octet-stream"
