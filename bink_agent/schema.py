import json
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bink_agent.prompts import SYSTEM_MESSAGE


class Function(BaseModel):
    name: str
    arguments: str = ""

    def get_arguments_dict(self) -> dict:
        """Parse the JSON arguments string.

        Raises:
            ValueError: If the arguments are not a JSON object.
        """
        arguments = (self.arguments or "").strip()
        if not arguments:
            return {}
        parsed = json.loads(arguments)
        if not isinstance(parsed, dict):
            raise ValueError(f"Tool arguments must be a JSON object, got {type(parsed).__name__}")
        return parsed

    @classmethod
    def create(cls, name: str, arguments: Union[str, dict]) -> "Function":
        if isinstance(arguments, dict):
            arguments_str = json.dumps(arguments)
        else:
            arguments_str = str(arguments)
        return cls(name=name, arguments=arguments_str)


class ToolCall(BaseModel):
    id: str
    type: str = "function"
    function: Function


class AgentMode(str, Enum):
    """The reasoning strategy of a run."""
    TOOLS_AGENT = "toolsAgent"
    PLAN_AND_EXECUTE_AGENT = "planAndExecuteAgent"


class AgentState(str, Enum):
    """
    The state of the agent.
    """
    IDLE = "IDLE"
    CONFIGURING = "CONFIGURING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    MAX_ITERATIONS_REACHED = "MAX_ITERATIONS_REACHED"
    FAILED = "FAILED"


class Role(str, Enum):
    """Message role options"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"

ROLE_VALUES = tuple(role.value for role in Role)
ROLE_TYPE = Literal[ROLE_VALUES]  # type: ignore


# Multimodal content blocks

class ImageSource(BaseModel):
    """Base64-encoded image payload"""
    type: Literal["base64"] = "base64"
    media_type: str = Field(..., description="MIME type of the attachment, e.g. image/png")
    data: str = Field(..., description="Base64 payload")


class ImageUrlSource(BaseModel):
    url: str = Field(..., description="URL of the image or base64 data URL")
    detail: Optional[Literal["auto", "low", "high"]] = Field(default="auto")


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    type: Literal["image"] = "image"
    source: ImageSource

    def to_image_url(self) -> "ImageUrlContent":
        """Re-express the image as an inline data URL block."""
        url = f"data:{self.source.media_type};base64,{self.source.data}"
        return ImageUrlContent(image_url=ImageUrlSource(url=url))


class ImageUrlContent(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrlSource


ContentBlock = Union[TextContent, ImageContent, ImageUrlContent]

MessageContent = Union[str, List[ContentBlock]]


class Message(BaseModel):
    """A chat message in the conversation.

    Content is either plain text or a list of content blocks when images are
    attached to a user turn.
    """

    role: ROLE_TYPE = Field(...)  # type: ignore
    content: Optional[MessageContent] = Field(default=None)
    tool_calls: Optional[List[ToolCall]] = Field(default=None)
    name: Optional[str] = Field(default=None)
    tool_call_id: Optional[str] = Field(default=None)

    @property
    def text_content(self) -> str:
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(block.text for block in self.content if isinstance(block, TextContent))

    def to_dict(self) -> Dict[str, Any]:
        """OpenAI-style message dict."""
        message: Dict[str, Any] = {"role": self.role}
        if self.content is not None:
            if isinstance(self.content, list):
                message["content"] = [
                    block.to_image_url().model_dump() if isinstance(block, ImageContent) else block.model_dump()
                    for block in self.content
                ]
            else:
                message["content"] = self.content
        if self.tool_calls:
            message["tool_calls"] = [tool_call.model_dump() for tool_call in self.tool_calls]
        if self.name:
            message["name"] = self.name
        if self.tool_call_id:
            message["tool_call_id"] = self.tool_call_id
        return message


class Completion(BaseModel):
    """Provider independent result of one model call."""
    text: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)
    usage: Optional[Dict[str, Any]] = None
    finish_reason: Optional[str] = None


class GenerationParams(BaseModel):
    temperature: float = 0.5
    max_tokens: Optional[int] = None


class AgentRunOptions(BaseModel):
    """Per-run options, as configured on the node."""

    model_config = ConfigDict(populate_by_name=True)

    system_message: str = Field(default=SYSTEM_MESSAGE, alias="systemMessage")
    max_iterations: int = Field(default=10, gt=0, alias="maxIterations")
    return_intermediate_steps: bool = Field(default=False, alias="returnIntermediateSteps")
    passthrough_binary_images: bool = Field(default=True, alias="passthroughBinaryImages")

    @field_validator("system_message", mode="before")
    @classmethod
    def _default_blank_system_message(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return SYSTEM_MESSAGE
        return value


class IntermediateStep(BaseModel):
    """One tool call and what came back from it."""
    tool: str
    tool_input: Dict[str, Any] = Field(default_factory=dict)
    observation: str
    kind: Literal["tool-result", "tool-error"] = "tool-result"
    step: Optional[str] = Field(default=None, description="Plan step this call belonged to")


MemoryState = Dict[str, Any]
