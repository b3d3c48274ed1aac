from wordplay import db
from wordplay.models import SessionRecord


def record_session(app, summary: dict) -> None:
    """Persist a session summary. Called from timer threads, so it opens its own app context.

    A failed write is rolled back and logged; the game has already ended
    and nothing else depends on the row.
    """
    with app.app_context():
        try:
            db.session.add(SessionRecord.from_summary(summary))
            db.session.commit()
        except Exception as exc:
            db.session.rollback()
            app.logger.warning(f"[record-failed] channel={summary.get('channel_id')} error={exc}")


def session_history(channel_id: str, limit: int = 20):
    return (
        SessionRecord.query.filter_by(channel_id=channel_id)
        .order_by(SessionRecord.id.desc())
        .limit(limit)
        .all()
    )
