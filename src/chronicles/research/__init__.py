"""Company research (initial query) services."""

from chronicles.research.base import CompanyResearcher
from chronicles.research.claude import DEFAULT_SYSTEM_PROMPT, ClaudeCompanyResearcher

__all__ = ["DEFAULT_SYSTEM_PROMPT", "ClaudeCompanyResearcher", "CompanyResearcher"]
