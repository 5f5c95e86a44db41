import json

import pytest

from bink_agent import config
from bink_agent.config import BinkCredentials
from bink_agent.memory.buffer import ConversationBufferMemory, history_to_messages
from bink_agent.prompts import SYSTEM_MESSAGE
from bink_agent.schema import AgentRunOptions
from bink_agent.utils.config_manager import ConfigManager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Reset credential env and disable dotenv loading for isolation."""
    for key in ("BNB_RPC_URL", "ETH_RPC_URL", "SOL_RPC_URL", "WALLET_MNEMONIC", "BINK_CONFIG_FILE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: None)


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return ConfigManager(path)


def test_credentials_come_from_the_config_file(tmp_path):
    manager = write_config(tmp_path, {"credentials": {
        "bnbRpcUrl": "https://bsc.example",
        "solRpcUrl": "https://sol.example",
        "mnemonic": "word " * 11 + "word",
    }})

    credentials = BinkCredentials.load(manager)

    assert credentials.rpc_urls == {
        "BNB": "https://bsc.example",
        "ETH": None,
        "SOL": "https://sol.example",
    }
    assert "word" not in repr(credentials)


def test_environment_overrides_the_config_file(tmp_path, monkeypatch):
    manager = write_config(tmp_path, {"credentials": {"bnbRpcUrl": "https://bsc.example"}})
    monkeypatch.setenv("BNB_RPC_URL", "https://override.example")
    monkeypatch.setenv("WALLET_MNEMONIC", "seed from env")

    credentials = BinkCredentials.load(manager)

    assert credentials.bnb_rpc_url == "https://override.example"
    assert credentials.mnemonic == "seed from env"


def test_missing_or_broken_config_file_is_empty(tmp_path):
    assert ConfigManager(tmp_path / "absent.json").get("credentials") == {}

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert ConfigManager(broken).get("llm.model", "fallback") == "fallback"


def test_config_manager_sets_dotted_keys(tmp_path):
    manager = write_config(tmp_path, {})

    manager.set("llm.model", "gpt-test")

    assert manager.get_llm_setting("model") == "gpt-test"
    assert json.loads((tmp_path / "config.json").read_text(encoding="utf-8")) == {"llm": {"model": "gpt-test"}}


def test_run_options_accept_node_aliases():
    options = AgentRunOptions.model_validate({
        "systemMessage": "  ",
        "maxIterations": 4,
        "returnIntermediateSteps": True,
    })

    assert options.system_message == SYSTEM_MESSAGE
    assert options.max_iterations == 4
    assert options.return_intermediate_steps is True
    assert options.passthrough_binary_images is True


@pytest.mark.asyncio
async def test_buffer_memory_keeps_a_window():
    memory = ConversationBufferMemory(max_messages=2)

    await memory.save_context({"input": "first"}, {"output": "one"})
    await memory.save_context({"input": "second"}, {"output": {"balance": 2}})

    state = await memory.load_memory_variables({})
    assert [m.content for m in state["chat_history"]] == ["second", "{'balance': 2}"]


def test_history_accepts_strings_and_dicts():
    assert history_to_messages("Human: hi\nAI: hello")[0].role == "system"

    messages = history_to_messages([
        {"role": "user", "content": "hi"},
        {"role": "tool", "content": "12.5", "tool_call_id": "call_1"},
    ])
    assert [m.role for m in messages] == ["user"]
