class BinkAgentError(Exception):
    """Base exception for agent execution errors"""
    pass


class InvalidConfiguration(BinkAgentError):
    """Raised when the agent is set up with unusable input"""
    pass


class InvalidState(BinkAgentError):
    """Raised when an agent method is called out of sequence"""
    pass


class ToolExecutionError(BinkAgentError):
    """Raised by a tool or plugin when an invocation fails.

    Recoverable errors are folded into the transcript as an observation and the
    run continues; non-recoverable ones fail the run.
    """

    def __init__(self, message: str, *, tool_name: str = None, recoverable: bool = True, cause: Exception = None):
        super().__init__(message)
        self.tool_name = tool_name
        self.recoverable = recoverable
        self.cause = cause


class NetworkUnavailableError(ToolExecutionError):
    """Raised when a plugin exercises a chain that has no usable RPC endpoint"""

    def __init__(self, symbol: str, reason: str = "no RPC URL configured"):
        super().__init__(f"Network {symbol} is unavailable: {reason}")
        self.symbol = symbol


class ModelError(BinkAgentError):
    """Raised when the underlying chat model fails"""

    def __init__(self, message: str, *, cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class MalformedOutput(BinkAgentError):
    """Raised when the response violates the structured-output contract"""

    def __init__(self, message: str, *, raw_output=None):
        super().__init__(message)
        self.raw_output = raw_output
