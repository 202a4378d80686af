# app/alert_engine/dashboard.py
import logging
from collections import Counter
from datetime import datetime
from typing import Optional

from app.alert_engine.alert_deriver import review_markers
from app.alert_engine.prophylaxis import parse_colonization
from app.alert_engine.schemas import (
    AntibioticTimelineEntry,
    DashboardStats,
    PatientTimeline,
)
from app.helpers.text import is_blank
from app.system_models.alert_model.alert_schemas import AlertResponse
from app.system_models.antibiotic_model.antibiotic_schemas import AntibioticResponse
from app.system_models.patient_model.patient_schemas import PatientResponse
from app.helpers.time import local_day_bounds, treatment_day, utcnow
from app.system_services.alert_repository import AlertRepository
from app.system_services.antibiotic_repository import AntibioticRepository
from app.system_services.culture_repository import CultureRepository
from app.system_services.patient_repository import PatientRepository

logger = logging.getLogger(__name__)

RECENT_ALERTS_LIMIT = 10
UNKNOWN_UNIT = "Outros"


class DashboardService:
    """Read-only aggregates for the ward overview."""

    def __init__(
        self,
        patients: PatientRepository,
        antibiotics: AntibioticRepository,
        cultures: CultureRepository,
        alerts: AlertRepository,
    ):
        self.patients = patients
        self.antibiotics = antibiotics
        self.cultures = cultures
        self.alerts = alerts

    async def stats(self, now: Optional[datetime] = None) -> DashboardStats:
        now = now or utcnow()
        active = await self.patients.list_active()
        colonized = [p for p in active if not is_blank(p.colonization)]

        by_unit = Counter(p.unidade or UNKNOWN_UNIT for p in active)
        by_colonization = Counter(
            code for p in colonized for code in parse_colonization(p.colonization)
        )

        day_start, day_end = local_day_bounds(now)
        return DashboardStats(
            total_patients=await self.patients.count_all(),
            active_patients=len(active),
            # needs daily neutrophil counts, which are not recorded as structured data
            neutropenic_patients=0,
            colonized_patients=len(colonized),
            pending_cultures=await self.cultures.count_pending(),
            active_antibiotics=await self.antibiotics.count_active(),
            atb_reviews_today=await self.alerts.count_reviews_due_between(day_start, day_end),
            by_unit=dict(by_unit),
            by_colonization=dict(by_colonization),
            recent_alerts=[
                AlertResponse.model_validate(alert)
                for alert in await self.alerts.list_unread(limit=RECENT_ALERTS_LIMIT)
            ],
        )

    async def atb_timeline(self, now: Optional[datetime] = None) -> list:
        """Active patients (bed order) that have at least one active course."""
        now = now or utcnow()
        timeline = []
        for patient in await self.patients.list_active():
            courses = await self.antibiotics.active_for_patient(patient.id)
            if not courses:
                continue
            timeline.append(
                PatientTimeline(
                    patient=PatientResponse.model_validate(patient),
                    antibiotics=[
                        AntibioticTimelineEntry(
                            antibiotic=AntibioticResponse.model_validate(course),
                            current_day=treatment_day(course.start_date, now),
                            review_dates=review_markers(course.start_date, now),
                        )
                        for course in courses
                    ],
                )
            )
        logger.info(f"📈 ATB timeline: {len(timeline)} patient(s) on antibiotics")
        return timeline
