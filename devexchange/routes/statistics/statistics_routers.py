import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.models.category_db.category_crud import get_category
from devexchange.models.quiz_db import statistics_crud
from devexchange.services import statistics

logger = logging.getLogger(__name__)

statistics_router = APIRouter(prefix="/AnswerStatisticsController", tags=["Statistics"])


def _user_report(db: Session, user_id: str) -> List[dict]:
    config_link_ids = statistics_crud.config_link_ids_for_user(db, user_id)
    if not config_link_ids:
        raise HTTPException(status_code=404, detail="No categories found for the given user.")
    report = statistics.fold_config_report(statistics_crud.config_report_rows(db, config_link_ids))
    if not report:
        raise HTTPException(status_code=404, detail="No data found for the given categories.")
    return report


def _attachment(content: str, media_type: str, filename: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@statistics_router.get("/image/{category_id}/{image_name}")
def stats_for_image(category_id: int, image_name: str, db: Session = Depends(get_db)) -> List[dict]:
    return statistics.stats_by_question(statistics_crud.answers_for_image(db, category_id, image_name))


@statistics_router.get("/config/sorted")
def sorted_config_report(user_id: str = Query(..., alias="userId"), db: Session = Depends(get_db)) -> List[dict]:
    return _user_report(db, user_id)


@statistics_router.get("/config/{config_link_id}")
def config_report(config_link_id: int, db: Session = Depends(get_db)) -> dict:
    report = statistics.fold_config_report(statistics_crud.config_report_rows(db, [config_link_id]))
    if not report:
        raise HTTPException(status_code=404, detail=f"No data found for config link {config_link_id}.")
    return report[0]


@statistics_router.get("/category/{category_id}")
def raw_category_answers(category_id: int, db: Session = Depends(get_db)) -> List[dict]:
    answers = statistics_crud.answers_for_category(db, category_id)
    if not answers:
        raise HTTPException(status_code=404, detail="No data found for the given category.")
    return [
        {
            "categoryId": answer.category_id,
            "categoryName": answer.category_name,
            "questionId": answer.question_id,
            "questionOptionId": answer.question_option_id,
            "imageName": answer.image_name,
            "imagePath": answer.image_path,
        }
        for answer in answers
    ]


@statistics_router.get("/categories/user/{user_id}")
def answered_categories(user_id: str, db: Session = Depends(get_db)) -> List[dict]:
    rows = statistics_crud.answered_categories(db, user_id)
    if not rows:
        raise HTTPException(status_code=404, detail="No answered categories found for this user.")
    return [{"configLinkId": config_link_id, "name": name} for config_link_id, name in rows]


@statistics_router.get("/export/json")
def export_json(user_id: str = Query(..., alias="userId"), db: Session = Depends(get_db)):
    report = _user_report(db, user_id)
    logger.info("Exporting JSON statistics for %s", user_id)
    return _attachment(
        statistics.report_to_json(report),
        "application/json; charset=utf-8",
        statistics.export_filename(user_id, "json"),
    )


@statistics_router.get("/export/csv")
def export_csv(user_id: str = Query(..., alias="userId"), db: Session = Depends(get_db)):
    report = _user_report(db, user_id)
    logger.info("Exporting CSV statistics for %s", user_id)
    return _attachment(
        statistics.report_to_csv(report),
        "text/csv; charset=utf-8",
        statistics.export_filename(user_id, "csv"),
    )


@statistics_router.get("/user/configlink-user-count")
def config_link_user_count(
    user_id: str = Query(..., alias="userId"),
    db: Session = Depends(get_db),
) -> Dict[int, Dict[str, int]]:
    config_link_ids = statistics_crud.config_link_ids_for_user(db, user_id)
    if not config_link_ids:
        raise HTTPException(status_code=404, detail="No categories found for the given user.")

    windows = statistics.time_windows()
    return {
        config_link_id: {
            name: statistics_crud.unique_users(db, config_link_id, start, end)
            for name, start, end in windows
        }
        for config_link_id in config_link_ids
    }


@statistics_router.get("/{category_id}")
def stats_for_category(category_id: int, db: Session = Depends(get_db)) -> List[dict]:
    category = get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail=f"Category with ID {category_id} not found")
    answers = statistics_crud.answers_for_category(db, category_id)
    if not answers:
        raise HTTPException(status_code=404, detail="No answers found for this category.")
    return statistics.stats_by_question(answers, category_name=category.category_name)
