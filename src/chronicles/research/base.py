from typing import Protocol

from chronicles.data import CompanyData, Usage


class CompanyResearcher(Protocol):
    """Interface for looking up a company's history and structure."""

    async def fetch_company_data(self, name: str) -> tuple[CompanyData, Usage]:
        """Research a company from scratch.

        Args:
            name: Company name as typed by the user.

        Returns:
            Tuple of (company data, usage).

        Raises:
            QueryError: If the upstream call fails or its answer is unparseable.
        """
        ...
