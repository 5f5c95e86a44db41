import argparse
import asyncio
import json
import logging

from bink_agent.config import BinkCredentials
from bink_agent.llm.openai_chat import OpenAIChatModel
from bink_agent.node import BinkAgentNode, ExecutionContext
from bink_agent.plugins import BalancePlugin
from bink_agent.schema import AgentMode
from bink_agent.utils.config_manager import ConfigManager

logging.basicConfig(level=logging.INFO, format='%(message)s')
logging.getLogger("openai").setLevel(logging.ERROR)
logging.getLogger("httpx").setLevel(logging.ERROR)
logging.getLogger("web3").setLevel(logging.ERROR)
logging.getLogger("urllib3").setLevel(logging.ERROR)


def discover_tools():
    plugin = BalancePlugin()
    return [(tool, plugin) for tool in plugin.get_tools()]


async def run(args) -> list:
    config_manager = ConfigManager(args.config)
    credentials = BinkCredentials.load(config_manager)
    chat_model = OpenAIChatModel(
        model=args.model or config_manager.get_llm_setting("model"),
        base_url=config_manager.get_llm_setting("base_url"),
    )
    ctx = ExecutionContext(
        items=[{"json": {"chatInput": args.prompt}}],
        chat_model=chat_model,
        credentials=credentials,
        tools=discover_tools,
        parameters={
            "agent": args.agent,
            "promptType": "auto",
            "options": {
                "maxIterations": args.max_iterations,
                "returnIntermediateSteps": args.intermediate_steps,
            },
        },
    )
    try:
        return await BinkAgentNode().execute(ctx)
    finally:
        await chat_model.close()


def main():
    parser = argparse.ArgumentParser(description="Run one prompt through the Bink blockchain agent")
    parser.add_argument('prompt', help='What to ask the agent')
    parser.add_argument('--agent', default=AgentMode.TOOLS_AGENT.value, choices=[mode.value for mode in AgentMode], help='Agent mode')
    parser.add_argument('--model', default=None, help='Chat model name (defaults to OPENAI_MODEL)')
    parser.add_argument('--max-iterations', default=10, type=int, help='Maximum reasoning/tool-call cycles')
    parser.add_argument('--intermediate-steps', action='store_true', help='Include tool calls in the output')
    parser.add_argument('--config', default='config.json', help='Path to config.json')
    args = parser.parse_args()

    result = asyncio.run(run(args))
    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    main()
