"""Example: use the service layer directly (without Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib

from config import get_settings_module

from src.office_attendance.office_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, shift_profile=settings.SHIFT_PROFILE)
    status = container.attendance_service.get_shift_status(1)
    print(
        f"checked_in={status.is_checked_in} checked_out={status.is_checked_out} "
        f"on_break={status.is_on_break} hours={status.current_working_hours}"
    )
    for record in container.attendance_service.get_history(1, limit=5):
        print(record.shift_date, record.status.value, f"{record.working_hours:.2f}h")


if __name__ == "__main__":
    main()
