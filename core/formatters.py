# core/formatters.py

# all pure text helpers used in response details and log lines
# must never import from models!

import datetime

# === number formatters ===


def format_gpa(gpa: float) -> str:
    return f"{gpa:.2f}"


def format_percentage(percentage: float) -> str:
    return f"{percentage:g} %"


def format_marks(total_marks: float) -> str:
    return f"{total_marks:g} / 100"


def format_credits(earned: int, total: int) -> str:
    return f"{earned} of {total} credits"


# === academic period formatters ===


def format_term(semester: int, academic_year: str) -> str:
    return f"semester {semester} ({academic_year})"


# === date formatters ===


def format_class_date_long(class_date: datetime.date) -> str:
    return f"{class_date.strftime('%A, %B %d, %Y')}"
