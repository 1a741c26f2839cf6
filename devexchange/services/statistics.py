"""Reshaping of answer rows into the statistics reports.

Everything here works on rows already pulled from the database, so the
grouping and export rules can be exercised without a session.
"""
import csv
import io
import json
from collections import namedtuple
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

ReportRow = namedtuple(
    "ReportRow",
    [
        "config_link_id",
        "category_id",
        "category_name",
        "image_name",
        "image_path",
        "question_id",
        "question_text",
        "option_id",
        "option_text",
    ],
)

CSV_HEADER = ["configLinkId", "categoryName", "imageName", "imagePath", "questionText", "optionText", "count"]

TIME_WINDOWS = [
    ("1_day", 1),
    ("3_days", 3),
    ("7_days", 7),
    ("30_days", 30),
    ("all_time", None),
]


def stats_by_question(answers: Iterable, category_name: Optional[str] = None) -> List[dict]:
    """Count answers per question and option.

    ``category_name`` overrides the name captured on the answer rows.
    """
    questions: Dict[int, dict] = {}
    for answer in answers:
        entry = questions.get(answer.question_id)
        if entry is None:
            entry = questions[answer.question_id] = {
                "questionId": answer.question_id,
                "categoryName": category_name if category_name is not None else answer.category_name,
                "options": {},
            }
        key = str(answer.question_option_id)
        entry["options"][key] = entry["options"].get(key, 0) + 1
    return list(questions.values())


def fold_config_report(rows: Iterable) -> List[dict]:
    """Fold sorted report rows into config link > image > question > option.

    A config link is named after its category with the lowest id.
    """
    report: List[dict] = []
    groups = {}
    for row in rows:
        group = groups.get(row.config_link_id)
        if group is None:
            group = {
                "configLinkId": row.config_link_id,
                "categoryName": row.category_name,
                "images": [],
                "_category_id": row.category_id,
                "_images": {},
            }
            groups[row.config_link_id] = group
            report.append(group)
        elif row.category_id < group["_category_id"]:
            group["_category_id"] = row.category_id
            group["categoryName"] = row.category_name

        image_key = (row.image_name, row.image_path)
        image = group["_images"].get(image_key)
        if image is None:
            image = {"imageName": row.image_name, "imagePath": row.image_path, "questions": [], "_questions": {}}
            group["_images"][image_key] = image
            group["images"].append(image)

        question = image["_questions"].get(row.question_id)
        if question is None:
            question = {
                "questionId": row.question_id,
                "questionText": row.question_text,
                "options": [],
                "_options": {},
            }
            image["_questions"][row.question_id] = question
            image["questions"].append(question)

        option = question["_options"].get(row.option_id)
        if option is None:
            option = {"optionId": row.option_id, "optionText": row.option_text, "count": 0}
            question["_options"][row.option_id] = option
            question["options"].append(option)
        option["count"] += 1

    for group in report:
        group.pop("_category_id")
        for image in group.pop("_images").values():
            for question in image.pop("_questions").values():
                question.pop("_options")
    return report


def flatten_report(report: List[dict]) -> List[list]:
    rows = []
    for group in report:
        for image in group["images"]:
            for question in image["questions"]:
                for option in question["options"]:
                    rows.append([
                        group["configLinkId"],
                        group["categoryName"],
                        image["imageName"],
                        image["imagePath"],
                        question["questionText"],
                        option["optionText"],
                        option["count"],
                    ])
    return rows


def report_to_csv(report: List[dict]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(flatten_report(report))
    return buffer.getvalue()


def report_to_json(report: List[dict]) -> str:
    return json.dumps(report, indent=2, ensure_ascii=False)


def export_filename(user_id: str, extension: str, now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.utcnow()).strftime("%Y%m%d_%H%M%S")
    return f"statistics_{user_id}_{stamp}.{extension}"


def time_windows(now: Optional[datetime] = None) -> List[Tuple[str, datetime, datetime]]:
    """Windows ``[today - N days, today)`` anchored at UTC midnight."""
    now = now or datetime.utcnow()
    today = datetime(now.year, now.month, now.day)
    windows = []
    for name, days in TIME_WINDOWS:
        start = datetime.min if days is None else today - timedelta(days=days)
        windows.append((name, start, today))
    return windows
