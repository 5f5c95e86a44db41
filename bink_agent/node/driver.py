"""
Node execution driver: one fresh agent per input item.
"""

import inspect
import logging
from typing import Any, Dict, List, Optional

from bink_agent.agents.bink import BinkAgent
from bink_agent.config import BinkCredentials
from bink_agent.errors import InvalidConfiguration
from bink_agent.llm.adapter import LLMAdapter
from bink_agent.node.context import NodeExecutionContext
from bink_agent.output.normalizer import normalize_response
from bink_agent.schema import AgentMode, GenerationParams, ImageContent, ImageSource
from bink_agent.tools.registry import ToolRegistry
from bink_agent.wallet.builder import build_context

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.5


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


def get_prompt_input(ctx: NodeExecutionContext, item_index: int, item: Dict[str, Any]) -> Optional[str]:
    """``auto`` reads the item's ``chatInput``; ``define`` reads the ``text`` parameter."""
    prompt_type = ctx.get_node_parameter("promptType", item_index, "auto")
    if prompt_type == "define":
        text = ctx.get_node_parameter("text", item_index, None)
    else:
        text = (item.get("json") or {}).get("chatInput")
    if not isinstance(text, str) or not text.strip():
        return None
    return text


def extract_images(item: Dict[str, Any]) -> List[ImageContent]:
    images = []
    for key, binary in (item.get("binary") or {}).items():
        mime_type = binary.get("mimeType") or binary.get("mime_type") or ""
        if not mime_type.startswith("image/") or not binary.get("data"):
            continue
        images.append(ImageContent(source=ImageSource(media_type=mime_type, data=binary["data"])))
    return images


class BinkAgentNode:
    """Runs the agent once per input item and collects normalised results."""

    display_name = "Bink AI Agent"

    async def execute(self, ctx: NodeExecutionContext) -> List[Dict[str, Any]]:
        items = ctx.get_input_data()
        credentials = ctx.get_credentials()
        if not isinstance(credentials, BinkCredentials):
            credentials = BinkCredentials.model_validate(credentials or {})

        catalogue = ToolRegistry(ctx.get_tools).collect()
        output_parser = ctx.get_optional_output_parser()

        return_data: List[Dict[str, Any]] = []
        for item_index, item in enumerate(items):
            try:
                result = await self._run_item(ctx, item_index, item, credentials, catalogue, output_parser)
                return_data.append({"json": result})
            except Exception as e:
                logger.error(f"Error processing item {item_index}: {e}")
                if ctx.continue_on_fail():
                    return_data.append({
                        "json": {"error": str(e) or "An error occurred"},
                        "pairedItem": {"item": item_index},
                    })
                    continue
                raise
        return return_data

    async def _run_item(self, ctx, item_index, item, credentials, catalogue, output_parser) -> Dict[str, Any]:
        try:
            llm = LLMAdapter(ctx.get_chat_model())
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
        memory = ctx.get_optional_memory()
        agent_type = ctx.get_node_parameter("agent", item_index, AgentMode.TOOLS_AGENT.value)
        options = ctx.get_node_parameter("options", item_index, {}) or {}

        networks, wallet = build_context(credentials.rpc_urls, credentials.mnemonic)
        agent = BinkAgent(
            llm,
            agent_type,
            memory,
            catalogue.tools,
            output_parser,
            GenerationParams(temperature=DEFAULT_TEMPERATURE),
            wallet,
            networks,
            options,
        )
        for plugin in catalogue.plugins:
            await agent.register_plugin(plugin)

        text = get_prompt_input(ctx, item_index, item)
        if text is None:
            raise InvalidConfiguration('The "text" parameter is empty.')
        images = extract_images(item)

        if memory is not None:
            prior_memory = await _maybe_await(memory.load_memory_variables({}))
            response = await agent.execute(text, prior_memory, images=images)
        else:
            response = await agent.execute(text, images=images)

        result = normalize_response(response, output_parser)
        if memory is not None:
            await _maybe_await(memory.save_context({"input": text}, {"output": response["output"]}))
        return result
