import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from esg_agent.models.company import EsgCompany, EsgReport

logger = logging.getLogger(__name__)


class CompanyNotFoundError(LookupError):
    def __init__(self, company_id: str):
        super().__init__(f"Company not found: {company_id}")
        self.company_id = company_id


class CompanyRepository:
    """Read-only access to company records and external ESG ratings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Companies ---

    async def list_companies(self, sector: str | None = None) -> list[EsgCompany]:
        query = select(EsgCompany).order_by(EsgCompany.company_name)
        if sector:
            query = query.where(EsgCompany.sector == sector)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_company(self, company_id: str) -> EsgCompany:
        company = await self.db.get(EsgCompany, company_id)
        if company is None:
            raise CompanyNotFoundError(company_id)
        return company

    async def list_sectors(self) -> list[str]:
        result = await self.db.execute(select(EsgCompany.sector).distinct())
        return sorted(s for s in result.scalars().all() if s)

    async def get_peer_set(self, company: EsgCompany, peer_ids: list[str] | None = None) -> list[EsgCompany]:
        """
        Peer population for `company`: the explicit peer ids when given,
        otherwise every company in the same sector. The company itself is
        always included.
        """
        if peer_ids:
            ids = set(peer_ids) | {company.id}
            result = await self.db.execute(
                select(EsgCompany).where(EsgCompany.id.in_(sorted(ids))).order_by(EsgCompany.company_name)
            )
            peers = list(result.scalars().all())
            missing = ids - {p.id for p in peers}
            if missing:
                logger.warning(f"Ignoring unknown peer ids for {company.id}: {sorted(missing)}")
            return peers

        return await self.list_companies(sector=company.sector)

    # --- External ratings ---

    async def list_reports_for_names(self, names: list[str]) -> list[EsgReport]:
        if not names:
            return []
        result = await self.db.execute(select(EsgReport).where(EsgReport.company_name.in_(names)))
        return list(result.scalars().all())
