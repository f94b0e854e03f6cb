from pydantic import BaseModel, ConfigDict


class CompanySummary(BaseModel):
    id: str
    name: str | None = None
    bse_code: str | None = None
    sector: str | None = None


class CompanyRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    serial_number: int | None = None
    company_name: str | None = None
    bse_code: str | None = None
    sector: str | None = None
    scope_1: float | None = None
    scope_2: float | None = None
    emissions_intensity: float | None = None
    net_zero_target_year: float | None = None
    energy_consumption: float | None = None
    renewable_energy: float | None = None
    water_consumption: float | None = None
    total_waste: float | None = None
    female_employees: float | None = None
    employees: float | None = None
    board_women_percent: float | None = None
    median_remuneration_female: float | None = None
    median_remuneration_male: float | None = None
    ltifr: float | None = None
    employee_turnover_rate: float | None = None
    independent_directors_percent: float | None = None
    data_breaches: float | None = None
