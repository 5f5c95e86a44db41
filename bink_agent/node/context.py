from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union

from bink_agent.config import BinkCredentials
from bink_agent.memory.buffer import ChatMemory
from bink_agent.output.parser import OutputParser


class NodeExecutionContext(Protocol):
    """Collaborators the host workflow engine provides to the node."""

    def get_input_data(self) -> List[Dict[str, Any]]: ...

    def get_chat_model(self) -> Any: ...

    def get_tools(self) -> Sequence[Any]: ...

    def get_optional_memory(self) -> Optional[ChatMemory]: ...

    def get_optional_output_parser(self) -> Optional[OutputParser]: ...

    def get_credentials(self) -> Union[BinkCredentials, Dict[str, Any]]: ...

    def get_node_parameter(self, name: str, item_index: int, default: Any = None) -> Any: ...

    def continue_on_fail(self) -> bool: ...


class ExecutionContext:
    """In-process ``NodeExecutionContext`` for the CLI and tests.

    ``parameters`` apply to every item; ``item_parameters`` (one dict per item)
    override them.
    """

    def __init__(
        self,
        items: List[Dict[str, Any]],
        chat_model: Any,
        credentials: Union[BinkCredentials, Dict[str, Any], None] = None,
        tools: Union[Sequence[Any], Callable[[], Sequence[Any]], None] = None,
        memory: Optional[ChatMemory] = None,
        output_parser: Optional[OutputParser] = None,
        parameters: Optional[Dict[str, Any]] = None,
        item_parameters: Optional[List[Dict[str, Any]]] = None,
        continue_on_fail: bool = False,
    ):
        self.items = items
        self.chat_model = chat_model
        self.credentials = credentials or BinkCredentials()
        self.tools = tools or []
        self.memory = memory
        self.output_parser = output_parser
        self.parameters = parameters or {}
        self.item_parameters = item_parameters or []
        self._continue_on_fail = continue_on_fail

    def get_input_data(self) -> List[Dict[str, Any]]:
        return self.items

    def get_chat_model(self) -> Any:
        return self.chat_model

    def get_tools(self) -> Sequence[Any]:
        return self.tools() if callable(self.tools) else list(self.tools)

    def get_optional_memory(self) -> Optional[ChatMemory]:
        return self.memory

    def get_optional_output_parser(self) -> Optional[OutputParser]:
        return self.output_parser

    def get_credentials(self) -> Union[BinkCredentials, Dict[str, Any]]:
        return self.credentials

    def get_node_parameter(self, name: str, item_index: int, default: Any = None) -> Any:
        if item_index < len(self.item_parameters) and name in self.item_parameters[item_index]:
            return self.item_parameters[item_index][name]
        return self.parameters.get(name, default)

    def continue_on_fail(self) -> bool:
        return self._continue_on_fail
