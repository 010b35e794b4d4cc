"""AI Agents package."""

from pocketledger.agents.advisor import AdviceResponse, FinancialAdvisor

__all__ = ["AdviceResponse", "FinancialAdvisor"]
