import json
from datetime import datetime
from types import SimpleNamespace

from devexchange.services.statistics import (
    CSV_HEADER,
    ReportRow,
    export_filename,
    flatten_report,
    fold_config_report,
    report_to_csv,
    report_to_json,
    stats_by_question,
    time_windows,
)


def _row(option_id, option_text, image_name="img1.jpg", config_link_id=1, category_name="Animals",
         question_id=10, question_text="Is it a cat?", category_id=1):
    return ReportRow(
        config_link_id=config_link_id,
        category_id=category_id,
        category_name=category_name,
        image_name=image_name,
        image_path=f"https://cdn.example.com/animals/{image_name}",
        question_id=question_id,
        question_text=question_text,
        option_id=option_id,
        option_text=option_text,
    )


class TestFoldConfigReport:
    """Grouping of joined answer rows into the nested report"""

    def test_counts_each_option(self):
        """Two Yes answers and one No answer on the same image"""
        rows = [_row(1, "Yes"), _row(1, "Yes"), _row(2, "No")]

        report = fold_config_report(rows)

        assert len(report) == 1
        group = report[0]
        assert group["configLinkId"] == 1
        assert group["categoryName"] == "Animals"
        assert len(group["images"]) == 1
        image = group["images"][0]
        assert image["imageName"] == "img1.jpg"
        question = image["questions"][0]
        assert question["questionText"] == "Is it a cat?"
        assert question["options"] == [
            {"optionId": 1, "optionText": "Yes", "count": 2},
            {"optionId": 2, "optionText": "No", "count": 1},
        ]

    def test_groups_by_config_link_and_image(self):
        rows = [
            _row(1, "Yes"),
            _row(1, "Yes", image_name="img2.jpg"),
            _row(5, "Red", config_link_id=2, category_name="Colours", question_id=20, question_text="Colour?"),
        ]

        report = fold_config_report(rows)

        assert [group["configLinkId"] for group in report] == [1, 2]
        assert [image["imageName"] for image in report[0]["images"]] == ["img1.jpg", "img2.jpg"]
        assert report[1]["categoryName"] == "Colours"

    def test_lowest_category_id_names_the_config_link(self):
        """The higher id answered the alphabetically first image"""
        rows = [
            _row(3, "Yes", image_name="a.jpg", category_name="Beta", category_id=2, question_id=11),
            _row(1, "Yes", image_name="z.jpg", category_name="Alpha", category_id=1),
        ]

        report = fold_config_report(rows)

        assert report[0]["categoryName"] == "Alpha"
        assert [image["imageName"] for image in report[0]["images"]] == ["a.jpg", "z.jpg"]

    def test_no_bookkeeping_keys_leak(self):
        report = fold_config_report([_row(1, "Yes")])

        assert set(report[0]) == {"configLinkId", "categoryName", "images"}
        assert set(report[0]["images"][0]) == {"imageName", "imagePath", "questions"}
        assert set(report[0]["images"][0]["questions"][0]) == {"questionId", "questionText", "options"}

    def test_empty_input(self):
        assert fold_config_report([]) == []


class TestExports:
    """CSV and JSON serialisation of the report"""

    def test_csv_quotes_commas_and_quotes(self):
        report = fold_config_report([_row(1, "Yes", category_name='Foo, "Bar"')])

        content = report_to_csv(report)

        lines = content.split("\r\n")
        assert lines[0] == ",".join(CSV_HEADER)
        assert lines[1] == '1,"Foo, ""Bar""",img1.jpg,https://cdn.example.com/animals/img1.jpg,Is it a cat?,Yes,1'
        assert content.endswith("\r\n")

    def test_csv_has_one_line_per_option(self):
        report = fold_config_report([_row(1, "Yes"), _row(1, "Yes"), _row(2, "No")])

        assert flatten_report(report) == [
            [1, "Animals", "img1.jpg", "https://cdn.example.com/animals/img1.jpg", "Is it a cat?", "Yes", 2],
            [1, "Animals", "img1.jpg", "https://cdn.example.com/animals/img1.jpg", "Is it a cat?", "No", 1],
        ]
        assert report_to_csv(report).count("\r\n") == 3

    def test_csv_of_empty_report_is_only_the_header(self):
        assert report_to_csv([]) == ",".join(CSV_HEADER) + "\r\n"

    def test_json_keeps_non_ascii(self):
        report = fold_config_report([_row(1, "Oui", category_name="Café")])

        content = report_to_json(report)

        assert "Café" in content
        assert json.loads(content) == report

    def test_export_filename_has_timestamp(self):
        name = export_filename("user-1", "csv", now=datetime(2024, 3, 5, 14, 7, 9))

        assert name == "statistics_user-1_20240305_140709.csv"


class TestStatsByQuestion:
    """Per-question option tallies"""

    def test_counts_per_option(self):
        answers = [
            SimpleNamespace(question_id=1, question_option_id=3, category_name="Animals"),
            SimpleNamespace(question_id=1, question_option_id=3, category_name="Animals"),
            SimpleNamespace(question_id=1, question_option_id=4, category_name="Animals"),
            SimpleNamespace(question_id=2, question_option_id=7, category_name="Animals"),
        ]

        stats = stats_by_question(answers)

        assert stats == [
            {"questionId": 1, "categoryName": "Animals", "options": {"3": 2, "4": 1}},
            {"questionId": 2, "categoryName": "Animals", "options": {"7": 1}},
        ]

    def test_category_name_override(self):
        answers = [SimpleNamespace(question_id=1, question_option_id=3, category_name="Old name")]

        stats = stats_by_question(answers, category_name="New name")

        assert stats[0]["categoryName"] == "New name"


class TestTimeWindows:
    """Rolling windows anchored at midnight"""

    def test_windows_end_at_midnight(self):
        windows = time_windows(now=datetime(2024, 5, 10, 15, 30))

        assert [name for name, _, _ in windows] == ["1_day", "3_days", "7_days", "30_days", "all_time"]
        assert all(end == datetime(2024, 5, 10) for _, _, end in windows)

    def test_window_starts(self):
        starts = {name: start for name, start, _ in time_windows(now=datetime(2024, 5, 10, 0, 0, 1))}

        assert starts["1_day"] == datetime(2024, 5, 9)
        assert starts["3_days"] == datetime(2024, 5, 7)
        assert starts["7_days"] == datetime(2024, 5, 3)
        assert starts["30_days"] == datetime(2024, 4, 10)
        assert starts["all_time"] == datetime.min

    def test_windows_widen_monotonically(self):
        starts = [start for _, start, _ in time_windows(now=datetime(2024, 1, 1, 12))]

        assert starts == sorted(starts, reverse=True)
