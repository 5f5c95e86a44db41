TOOLS_AGENT_PROTOCOL = """You can call tools to complete the user's request.

At each step either:
- call one or more tools, passing arguments that match each tool's JSON schema, or
- reply with your final answer as plain text, without calling any tool.

After a tool call you will receive its output (or an error message) as a tool message. Use it to decide the next step. If a tool reports an error, adjust the arguments or try another approach instead of repeating the same call.
"""
