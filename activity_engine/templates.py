"""Plain-text agenda and follow-up drafts for appointments."""

from __future__ import annotations

from datetime import datetime

from activity_engine.schema import AppointmentLike


def _long_time(value: datetime) -> str:
    return f"{value:%A, %B} {value.day} at {value.hour % 12 or 12}:{value:%M %p}"


def _kind(appointment: AppointmentLike) -> str:
    return appointment.type.replace("_", " ")


def agenda_template(appointment: AppointmentLike) -> str:
    client = appointment.client_name or "the client"
    return "\n".join(
        [
            f"Agenda: {appointment.title}",
            f"Scheduled for {_long_time(appointment.start_time)}",
            "",
            "1. Warm welcome and relationship check-in",
            f"2. Review current financial position with {client}",
            f"3. Discuss key priorities for the {_kind(appointment)}",
            "4. Capture action items and next steps",
        ]
    )


def follow_up_template(appointment: AppointmentLike) -> str:
    client = appointment.client_name or "client"
    first_name = client.split(" ")[0] or client
    meeting_date = f"{appointment.start_time:%B} {appointment.start_time.day}, {appointment.start_time:%Y}"
    return "\n".join(
        [
            f"Subject: Thank you for meeting on {meeting_date}",
            "",
            f"Hi {first_name},",
            "",
            f"Thank you for taking the time for our {_kind(appointment)} today.",
            "Here is a quick summary of what we discussed and the immediate next steps:",
            "",
            "- Key decisions and confirmations",
            "- Outstanding questions to address",
            "- Follow-up materials promised during the meeting",
            "",
            "Please let me know if there is anything else you need in the meantime.",
            "",
            "Best regards,",
            "Your Wealth RM Team",
        ]
    )
