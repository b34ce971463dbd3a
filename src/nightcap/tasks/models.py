"""Task data models."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from nightcap.core.environment import RuntimeEnvironment


class TaskParam(BaseModel):
    """Parameter accepted by a task."""

    type: Literal["string", "number", "boolean"] = "string"
    description: str = ""
    required: bool = False
    default: Optional[Union[str, int, float, bool]] = None


@dataclass(frozen=True)
class TaskContext:
    """Per-invocation context passed to task actions."""

    config: dict[str, Any]  # Resolved configuration
    network: dict[str, Any]  # Selected network configuration
    network_name: str
    params: dict[str, Any] = field(default_factory=dict)
    verbose: bool = False
    env: Optional["RuntimeEnvironment"] = None
    run_super: Optional[Callable[[], Awaitable[Any]]] = None  # Set only for overriding tasks


TaskAction = Callable[[TaskContext], Any]


class TaskDefinition(BaseModel):
    """Named, parameterized unit of work."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str = ""
    dependencies: list[str] = Field(default_factory=list)
    params: dict[str, TaskParam] = Field(default_factory=dict)
    action: TaskAction


@dataclass
class TaskResult:
    """Outcome of a single executed task."""

    name: str
    success: bool
    duration: float  # Seconds
    error: Optional[BaseException] = None
