from esg_agent.models.company import EsgCompany, EsgReport

__all__ = [
    "EsgCompany",
    "EsgReport",
]
