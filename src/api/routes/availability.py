"""Availability API Routes

FastAPI routes for trainer availability rules and bookable slots.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import ClientError
from src.api.schemas.availability_request import CreateAvailabilityRuleRequestSchema
from src.app.services.studio_policy_provider import StudioPolicyProvider
from src.app.use_cases.availability.dtos import (
    AvailabilityResponseDTO,
    AvailabilityRuleDTO,
    CreateAvailabilityRuleCommandDTO,
    GetAvailabilityQueryDTO,
    ListAvailabilityRulesResponseDTO,
)
from src.app.use_cases.availability.create_rule import CreateAvailabilityRule
from src.app.use_cases.availability.list_rules import ListAvailabilityRules
from src.app.use_cases.availability.delete_rule import DeleteAvailabilityRule
from src.app.use_cases.availability.get_availability import GetAvailability
from src.adapter.repositories.availability_rule_repository import SqlAlchemyAvailabilityRuleRepository
from src.adapter.repositories.booking_repository import SqlAlchemyBookingRepository
from src.adapter.repositories.service_repository import SqlAlchemyServiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_policy_provider, get_session

router = APIRouter(prefix="/availability", tags=["Availability"])


@router.post(
    "/rules",
    response_model=AvailabilityRuleDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_availability_rule(
    request: CreateAvailabilityRuleRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Add a weekly or one-off window to a trainer's calendar.

    `polarity=blocked` carves time out of the open windows (breaks,
    holidays). Existing bookings are not affected.
    """
    command = CreateAvailabilityRuleCommandDTO(**request.model_dump())
    use_case = CreateAvailabilityRule(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyAvailabilityRuleRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{trainer_id}/rules", response_model=ListAvailabilityRulesResponseDTO)
async def list_availability_rules(
    trainer_id: str,
    session: AsyncSession = Depends(get_session),
):
    """All of a trainer's availability rules."""
    result = await ListAvailabilityRules(SqlAlchemyAvailabilityRuleRepository(session)).execute(trainer_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability_rule(
    rule_id: str,
    trainer_id: Optional[str] = Query(default=None, description="Owning trainer, checked when given"),
    session: AsyncSession = Depends(get_session),
):
    """Remove a rule."""
    use_case = DeleteAvailabilityRule(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyAvailabilityRuleRepository(session),
    )
    result = await use_case.execute(rule_id, trainer_id=trainer_id)

    if result.is_err():
        raise ClientError(result.error)


@router.get("/{trainer_id}", response_model=AvailabilityResponseDTO)
async def get_availability(
    trainer_id: str,
    start_date: date = Query(..., description="First day, YYYY-MM-DD"),
    end_date: date = Query(..., description="Last day (inclusive), YYYY-MM-DD"),
    service_id: str = Query(..., description="Service the slots are for"),
    stride: Optional[int] = Query(default=None, gt=0, le=240, description="Slot grid in minutes"),
    session: AsyncSession = Depends(get_session),
    policy_provider: StudioPolicyProvider = Depends(get_policy_provider),
):
    """
    Open windows and conflict-free start times for a service.

    Advisory only: booking re-checks availability under lock.
    """
    use_case = GetAvailability(
        SqlAlchemyBookingRepository(session),
        SqlAlchemyServiceRepository(session),
        SqlAlchemyAvailabilityRuleRepository(session),
        policy_provider,
        default_stride_minutes=ApplicationConfig.AVAILABILITY_SLOT_STRIDE_MINUTES,
        max_range_days=ApplicationConfig.MAX_AVAILABILITY_RANGE_DAYS,
    )
    result = await use_case.execute(
        GetAvailabilityQueryDTO(
            trainer_id=trainer_id,
            service_id=service_id,
            start_date=start_date,
            end_date=end_date,
            stride_minutes=stride,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
