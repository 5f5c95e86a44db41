"""
Turns the host's tool discovery output into an ordered tool list and the
list of plugins to activate.
"""

import logging
from typing import Any, Callable, List, Mapping, NamedTuple, Optional, Sequence, Union

from bink_agent.errors import InvalidConfiguration
from bink_agent.plugins.base import BasePlugin
from bink_agent.tools.base import BaseTool

logger = logging.getLogger(__name__)


class ToolBinding(NamedTuple):
    tool: BaseTool
    plugin: Optional[BasePlugin] = None

    @property
    def has_plugin(self) -> bool:
        return self.plugin is not None


class ToolCatalogue(NamedTuple):
    bindings: List[ToolBinding]

    @property
    def tools(self) -> List[BaseTool]:
        return [binding.tool for binding in self.bindings]

    @property
    def plugins(self) -> List[BasePlugin]:
        """Present plugins in discovery order, one entry per paired tool."""
        return [binding.plugin for binding in self.bindings if binding.plugin is not None]


DiscoveredEntry = Union[BaseTool, ToolBinding, tuple, Mapping[str, Any]]


def to_binding(entry: DiscoveredEntry) -> ToolBinding:
    """Normalise one discovery entry into a ``ToolBinding``.

    Accepts a bare tool, a ``(tool, plugin)`` pair, a binding, or a mapping with
    ``tool`` and optional ``plugin`` keys.
    """
    if isinstance(entry, ToolBinding):
        tool, plugin = entry
    elif isinstance(entry, BaseTool):
        tool, plugin = entry, None
    elif isinstance(entry, tuple) and len(entry) == 2:
        tool, plugin = entry
    elif isinstance(entry, Mapping) and "tool" in entry:
        tool, plugin = entry["tool"], entry.get("plugin")
    else:
        raise InvalidConfiguration(f"Unrecognised tool entry: {entry!r}")

    if not isinstance(tool, BaseTool):
        raise InvalidConfiguration(f"Expected a tool, got {type(tool).__name__}")
    if plugin is not None and not isinstance(plugin, BasePlugin):
        raise InvalidConfiguration(
            f"Tool {tool.name} is paired with {type(plugin).__name__}, which is not a plugin"
        )
    return ToolBinding(tool, plugin)


class ToolRegistry:
    """Collects tools (each optionally paired with a plugin) from a discovery source."""

    def __init__(self, discovery: Union[Callable[[], Sequence[DiscoveredEntry]], Any]):
        self.discovery = discovery

    def _discover(self) -> Sequence[DiscoveredEntry]:
        if callable(self.discovery):
            return self.discovery()
        if hasattr(self.discovery, "get_tools"):
            return self.discovery.get_tools()
        raise InvalidConfiguration(f"Tool discovery source {self.discovery!r} is not callable")

    def collect(self) -> ToolCatalogue:
        try:
            entries = self._discover()
        except InvalidConfiguration:
            raise
        except Exception as e:
            raise InvalidConfiguration(f"Tool discovery failed: {e}") from e

        if entries is None:
            entries = []
        catalogue = ToolCatalogue([to_binding(entry) for entry in entries])
        logger.info(
            f"Discovered {len(catalogue.bindings)} tools with {len(catalogue.plugins)} plugins"
        )
        return catalogue
