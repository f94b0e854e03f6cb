from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from esg_agent.database import Base

# Raw numeric columns read by the benchmarking engine
RAW_METRIC_COLUMNS = (
    "scope_1",
    "scope_2",
    "emissions_intensity",
    "net_zero_target_year",
    "energy_consumption",
    "renewable_energy",
    "water_consumption",
    "total_waste",
    "female_employees",
    "employees",
    "board_women_percent",
    "median_remuneration_female",
    "median_remuneration_male",
    "ltifr",
    "employee_turnover_rate",
    "independent_directors_percent",
    "data_breaches",
)


class EsgCompany(Base):
    __tablename__ = "esg_companies"
    __table_args__ = (
        Index("ix_esg_companies_sector", "sector"),
        Index("ix_esg_companies_name", "company_name"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    serial_number: Mapped[int | None] = mapped_column(Integer)
    company_name: Mapped[str | None] = mapped_column(String(255))
    bse_code: Mapped[str | None] = mapped_column(String(20))
    sector: Mapped[str | None] = mapped_column(String(100))

    scope_1: Mapped[float | None] = mapped_column(Float)
    scope_2: Mapped[float | None] = mapped_column(Float)
    emissions_intensity: Mapped[float | None] = mapped_column(Float)
    net_zero_target_year: Mapped[float | None] = mapped_column(Float)
    energy_consumption: Mapped[float | None] = mapped_column(Float)
    renewable_energy: Mapped[float | None] = mapped_column(Float)
    water_consumption: Mapped[float | None] = mapped_column(Float)
    total_waste: Mapped[float | None] = mapped_column(Float)
    female_employees: Mapped[float | None] = mapped_column(Float)
    employees: Mapped[float | None] = mapped_column(Float)
    board_women_percent: Mapped[float | None] = mapped_column(Float)
    median_remuneration_female: Mapped[float | None] = mapped_column(Float)
    median_remuneration_male: Mapped[float | None] = mapped_column(Float)
    ltifr: Mapped[float | None] = mapped_column(Float)
    employee_turnover_rate: Mapped[float | None] = mapped_column(Float)
    independent_directors_percent: Mapped[float | None] = mapped_column(Float)
    data_breaches: Mapped[float | None] = mapped_column(Float)

    def to_record(self) -> dict:
        """Plain dict view consumed by the benchmarking engine."""
        record = {
            "id": self.id,
            "serial_number": self.serial_number,
            "company_name": self.company_name,
            "bse_code": self.bse_code,
            "sector": self.sector,
        }
        for column in RAW_METRIC_COLUMNS:
            record[column] = getattr(self, column)
        return record


class EsgReport(Base):
    """External ESG rating scraped from a ratings provider. Scores are stored as text."""

    __tablename__ = "esg_reports"
    __table_args__ = (
        Index("ix_esg_reports_company_name", "company_name"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    serial_number: Mapped[str | None] = mapped_column(String(20))
    company_name: Mapped[str | None] = mapped_column(String(255))
    sector: Mapped[str | None] = mapped_column(String(100))
    esg_score: Mapped[str | None] = mapped_column(String(20))
    environment_score: Mapped[str | None] = mapped_column(String(20))
    social_score: Mapped[str | None] = mapped_column(String(20))
    governance_score: Mapped[str | None] = mapped_column(String(20))
    latest_report_date: Mapped[str | None] = mapped_column(String(50))
    coverage: Mapped[str | None] = mapped_column(String(100))
    scraped_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
