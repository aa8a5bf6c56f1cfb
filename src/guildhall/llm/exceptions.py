# ============================================================
# ORACLE EXCEPTIONS
# Never leave the llm package: the remote oracle converts them into fallbacks.
# ============================================================

class OracleError(Exception):
    """Base exception for decision oracle failures"""
    pass


class OracleUnavailableError(OracleError):
    """The remote model could not be reached or timed out"""
    pass


class JSONExtractionError(OracleError):
    """Could not extract JSON from LLM response"""
    pass


class ValidationFailedError(OracleError):
    """JSON was extracted but does not describe a usable decision"""
    pass
