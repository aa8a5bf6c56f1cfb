from guildhall.llm.client import OllamaClient
from guildhall.llm.exceptions import OracleError
from guildhall.llm.oracle import DecisionOracle, FallbackDecisionOracle, RemoteDecisionOracle
from guildhall.llm.parsing import extract_json, parse_decision, parse_quest


def build_oracle(settings) -> DecisionOracle:
    """Construct the process-wide oracle from settings; callers inject it where needed."""
    if not settings.oracle_enabled:
        return FallbackDecisionOracle()

    client = OllamaClient(
        model_name=settings.oracle_model,
        base_url=settings.ollama_host,
        timeout=settings.oracle_timeout,
        max_retries=settings.oracle_max_retries,
    )
    return RemoteDecisionOracle(client)


__all__ = [
    'OllamaClient',
    'OracleError',
    'DecisionOracle',
    'FallbackDecisionOracle',
    'RemoteDecisionOracle',
    'extract_json',
    'parse_decision',
    'parse_quest',
    'build_oracle',
]
