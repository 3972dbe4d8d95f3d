from pydantic import BaseModel, Field
from typing import Optional, List

from ..conversation.mood import MoodLabel

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    isFormError: bool = False

class TokenBundle(BaseModel):
    accessToken: str
    refreshToken: str
    expiresIn: int

class UserOut(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    createdAt: str

class SignupRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=3, max_length=255)
    email: Optional[str] = None

class LoginRequest(BaseModel):
    username: str
    password: str

class RefreshRequest(BaseModel):
    refreshToken: str

class LogoutRequest(BaseModel):
    refreshToken: str

class AuthData(BaseModel):
    user: UserOut
    token: TokenBundle

class AuthResponse(BaseModel):
    success: bool = True
    message: str
    data: AuthData

class UserResponse(BaseModel):
    success: bool = True
    message: str
    data: dict

class StartSessionIn(BaseModel):
    userId: str

class AnswerIn(BaseModel):
    answer: str

class MoodIn(BaseModel):
    mood: MoodLabel

class MoodAssessmentOut(BaseModel):
    id: str
    userId: str
    sessionId: Optional[str] = None
    mood: MoodLabel
    assessedAt: str

class StartSessionResponse(BaseModel):
    success: bool = True
    message: str
    sessionId: str
    state: str

class AnswerResponse(BaseModel):
    success: bool = True
    message: str
    questionsAnswered: int
    state: str
    mood: Optional[MoodLabel] = None
    moodAssessment: Optional[MoodAssessmentOut] = None

class HistoryResponse(BaseModel):
    success: bool = True
    assessments: List[MoodAssessmentOut]

class MoodRecordData(BaseModel):
    moodAssessment: MoodAssessmentOut

class MoodRecordResponse(BaseModel):
    success: bool = True
    message: str
    data: MoodRecordData

class TranscriptMessage(BaseModel):
    role: str
    content: str

class TranscriptResponse(BaseModel):
    success: bool = True
    sessionId: str
    messages: List[TranscriptMessage]
