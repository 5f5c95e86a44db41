PLAN_EXECUTE_PROTOCOL = """You work in two phases.

1. Plan: break the user's request into a short ordered list of sub-goals.
2. Act: carry out the sub-goals one at a time, calling tools whenever live data is needed.

When all sub-goals are done, the results are combined into one final answer for the user.
"""

PLANNER_PROMPT = """Let's first understand the request and devise a plan to solve it.
Reply with JSON only, in the form {{"steps": ["first sub-goal", "second sub-goal", ...]}}.
Keep the plan as short as possible and do not add a step for writing the final answer.

Request: {input}"""

REPLANNER_PROMPT = """The original plan was:
{plan}

Completed sub-goals and their results:
{completed}

The sub-goal "{failed_step}" could not be completed: {failure}

Devise a revised plan for the remaining work. Reply with JSON only, in the form {{"steps": [...]}}.
If nothing is left to do, reply with {{"steps": []}}.

Request: {input}"""

STEP_PROMPT = """Overall request: {input}

Completed sub-goals so far:
{completed}

Current sub-goal: {step}

Complete only the current sub-goal. Call tools if needed, then reply with the sub-goal's result as plain text."""

SYNTHESIS_PROMPT = """Request: {input}

Results of the sub-goals:
{completed}

Using these results, write the final answer to the request."""
