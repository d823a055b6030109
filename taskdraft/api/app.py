"""FastAPI web application for taskdraft."""

from typing import Optional
from fastapi import Depends, FastAPI
from pydantic import BaseModel, Field

from taskdraft.engine.interpreter import TaskInterpreter, get_default_interpreter
from taskdraft.models.task import TaskDraft

# Initialize FastAPI app
app = FastAPI(
    title="taskdraft API",
    description="Turns a free-form sentence into a structured task draft",
    version="0.1.0"
)


class ParseTaskRequest(BaseModel):
    """Request body for task parsing."""
    input: str = Field(..., min_length=1, description="Text to parse into a task", examples=["Tomorrow at 10am buy milk urgent"])
    lang: Optional[str] = Field(None, description="Optional language code (ignored, kept for backward compatibility)")


class HealthResponse(BaseModel):
    """Response for health check."""
    status: str


def get_interpreter() -> TaskInterpreter:
    """Interpreter dependency (overridden in tests)."""
    return get_default_interpreter()


@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return HealthResponse(status="ok")


@app.post("/tasks/parse", response_model=TaskDraft)
def parse_task(request: ParseTaskRequest, interpreter: TaskInterpreter = Depends(get_interpreter)):
    """Parse free text into a task draft.

    Oracle failures never surface here: the interpreter degrades to
    heuristics, so this endpoint answers 200 for any non-empty input.
    """
    return interpreter.interpret(request.input)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
