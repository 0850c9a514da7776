from __future__ import annotations

from carebook.domain.entities.consultant import ConsultantSchedule


SEED_CONSULTANTS: list[ConsultantSchedule] = [
    ConsultantSchedule(
        consultant_id="dr_reyes",
        name="Dr. Maria Reyes",
        available_weekdays=("Monday", "Wednesday", "Friday"),
        slots=("8:00 AM to 9:00 AM", "9:00 AM to 10:00 AM", "1:00 PM to 2:00 PM", "3:00 PM to 4:00 PM"),
        hourly_rate=800.0,
        platforms=("Online", "In Person"),
        specialty="Obstetrics",
    ),
    ConsultantSchedule(
        consultant_id="dr_santos",
        name="Dr. Ana Santos",
        available_weekdays=("Tuesday", "Thursday", "Saturday"),
        slots=("10:00 AM to 11:00 AM", "2:00 PM to 3:00 PM", "7:00 PM to 8:00 PM"),
        hourly_rate=650.0,
        platforms=("Online",),
        specialty="Perinatal mental health",
    ),
    ConsultantSchedule(
        consultant_id="dr_cruz",
        name="Dr. Liza Cruz",
        available_weekdays=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"),
        slots=("9:00 AM", "11:00 AM", "4:00 PM"),
        hourly_rate=700.0,
        platforms=("In Person",),
        specialty="Lactation and newborn care",
    ),
]
