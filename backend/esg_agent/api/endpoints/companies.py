from fastapi import APIRouter, Depends, HTTPException

from esg_agent.api.dependencies import get_repository
from esg_agent.api.validation import validate_company_id
from esg_agent.schemas.company import CompanyRecord
from esg_agent.services.company_repository import CompanyNotFoundError, CompanyRepository

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=list[CompanyRecord])
async def list_companies(repository: CompanyRepository = Depends(get_repository)):
    return await repository.list_companies()


@router.get("/sectors", response_model=list[str])
async def list_sectors(repository: CompanyRepository = Depends(get_repository)):
    return await repository.list_sectors()


@router.get("/{company_id}", response_model=CompanyRecord)
async def get_company(company_id: str, repository: CompanyRepository = Depends(get_repository)):
    company_id = validate_company_id(company_id)
    try:
        return await repository.get_company(company_id)
    except CompanyNotFoundError:
        raise HTTPException(status_code=404, detail=f"Company '{company_id}' not found")
