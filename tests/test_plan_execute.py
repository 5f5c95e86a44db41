import pytest

from bink_agent.agents.bink import BinkAgent
from bink_agent.agents.plan_execute import parse_plan
from bink_agent.output.parser import OutputParser
from bink_agent.schema import AgentState

from stubs import ScriptedChatModel, answer, call_tool


async def plan_agent(model, context, plugin, options=None, **kwargs):
    networks, wallet = context
    agent = BinkAgent(
        model,
        "planAndExecuteAgent",
        tools=plugin.get_tools(),
        wallet=wallet,
        networks=networks,
        options=options or {"returnIntermediateSteps": True},
        **kwargs,
    )
    await agent.register_plugin(plugin)
    return agent


@pytest.mark.parametrize("text, expected", [
    ('{"steps": ["Find address", "Check balance"]}', ["Find address", "Check balance"]),
    ('["Find address", " ", "Check balance"]', ["Find address", "Check balance"]),
    ('```json\n{"steps": ["Only step"]}\n```', ["Only step"]),
    ("Plan:\n1. Find address\n2) Check balance\n- Report back", ["Find address", "Check balance", "Report back"]),
    ("I will just answer directly.", []),
    ("", []),
])
def test_parse_plan(text, expected):
    assert parse_plan(text) == expected


@pytest.mark.asyncio
async def test_failed_step_triggers_a_single_replan(context, plugin):
    model = ScriptedChatModel([
        answer('{"steps": ["Look up the wallet address", "Check the ETH balance", "Summarise"]}'),
        answer("The address is known."),
        call_tool("get_balance", {"chain": "ETH"}),
        answer("ETH is not available."),
        answer('{"steps": ["Check the BNB balance instead", "Summarise"]}'),
        call_tool("get_balance", {"chain": "BNB"}),
        answer("12.5 BNB"),
        answer("Summary ready."),
        answer("You hold 12.5 BNB; Ethereum is not configured."),
    ])
    agent = await plan_agent(model, context, plugin)

    response = await agent.execute("How much do I hold?")

    assert agent.state == AgentState.COMPLETED
    assert response["output"] == "You hold 12.5 BNB; Ethereum is not configured."
    assert response["truncated"] is False
    assert agent.replans == 1
    assert len(model.calls) == 9
    assert response["plan"] == ["Look up the wallet address", "Check the BNB balance instead", "Summarise"]

    replan_prompt = model.calls[4]["messages"][-1]["content"]
    assert "Check the ETH balance" in replan_prompt
    assert "Network ETH is unavailable" in replan_prompt

    kinds = [(step["step"], step["kind"]) for step in response["intermediateSteps"]]
    assert kinds == [
        ("Check the ETH balance", "tool-error"),
        ("Check the BNB balance instead", "tool-result"),
    ]


@pytest.mark.asyncio
async def test_second_failure_does_not_replan_again(context, plugin):
    model = ScriptedChatModel([
        answer('["Check ETH", "Check ETH again"]'),
        call_tool("get_balance", {"chain": "ETH"}),
        answer("ETH failed."),
        answer('["Check ETH again"]'),
        call_tool("get_balance", {"chain": "ETH"}),
        answer("ETH failed again."),
        answer("Ethereum is not reachable right now."),
    ])
    agent = await plan_agent(model, context, plugin)

    response = await agent.execute("What is my ETH balance?")

    assert agent.state == AgentState.COMPLETED
    assert agent.replans == 1
    assert len(model.calls) == 7
    assert response["output"] == "Ethereum is not reachable right now."


@pytest.mark.asyncio
async def test_planning_calls_do_not_offer_tools(context, plugin):
    model = ScriptedChatModel([
        answer('["Check the BNB balance"]'),
        call_tool("get_balance", {"chain": "BNB"}),
        answer("12.5 BNB"),
        answer("12.5 BNB in total."),
    ])
    agent = await plan_agent(model, context, plugin)

    await agent.execute("Balance?")

    assert "tools" not in model.calls[0]
    assert "tools" in model.calls[1]
    assert "tools" not in model.calls[-1]


@pytest.mark.asyncio
async def test_iteration_budget_is_shared_across_steps(context, plugin):
    model = ScriptedChatModel([
        answer('["Check BNB", "Report"]'),
        call_tool("get_balance", {"chain": "BNB"}),
        call_tool("get_balance", {"chain": "BNB"}),
    ])
    agent = await plan_agent(model, context, plugin, options={"maxIterations": 2})

    response = await agent.execute("Balance?")

    assert agent.state == AgentState.MAX_ITERATIONS_REACHED
    assert response["truncated"] is True
    assert len(model.calls) == 3
    assert "Check BNB" in response["output"]
    assert "Report" not in response["output"]


@pytest.mark.asyncio
async def test_steps_left_after_the_budget_is_spent_are_not_reported(context, plugin):
    model = ScriptedChatModel([
        answer('{"steps": ["Check BNB", "Check ETH"]}'),
        answer("BNB is 12.5"),
    ])
    agent = await plan_agent(model, context, plugin, options={"maxIterations": 1})

    response = await agent.execute("Balances?")

    assert agent.state == AgentState.MAX_ITERATIONS_REACHED
    assert response["truncated"] is True
    assert len(model.calls) == 2
    assert response["output"].count("BNB is 12.5") == 1
    assert "Check BNB" in response["output"]
    assert "Check ETH" not in response["output"]


@pytest.mark.asyncio
async def test_empty_plan_runs_the_request_as_one_step(context, plugin):
    model = ScriptedChatModel([
        answer("Nothing to plan."),
        answer("Hello there."),
        answer("Hello there!"),
    ])
    agent = await plan_agent(model, context, plugin)

    response = await agent.execute("Say hello")

    assert response["plan"] == ["Say hello"]
    assert response["output"] == "Hello there!"
    assert agent.state == AgentState.COMPLETED


@pytest.mark.asyncio
async def test_synthesis_receives_formatting_instructions(context, plugin):
    parser = OutputParser(json_schema={"type": "object", "required": ["balance"]})
    model = ScriptedChatModel([
        answer('["Check the BNB balance"]'),
        answer("12.5 BNB"),
        answer('{"output": {"balance": "12.5"}}'),
    ])
    agent = await plan_agent(model, context, plugin, output_parser=parser)

    response = await agent.execute("Balance as JSON")

    synthesis = model.calls[-1]["messages"][-1]["content"]
    assert '"output"' in synthesis
    assert "required" in synthesis
    assert response["output"] == '{"output": {"balance": "12.5"}}'
