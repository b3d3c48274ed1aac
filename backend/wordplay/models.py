from wordplay import db
import json
from datetime import datetime, timezone


class SessionRecord(db.Model):
    """Result of one session, written when it leaves the registry."""
    __tablename__ = 'session_record'
    id = db.Column(db.Integer, primary_key=True)
    channel_id = db.Column(db.String(128), nullable=False, index=True)
    game = db.Column(db.String(32), nullable=False)
    outcome = db.Column(db.String(32), nullable=False)  # finished, cancelled, aborted, watchdog, force_end
    rounds_played = db.Column(db.Integer, default=0, nullable=False)
    winner_id = db.Column(db.String(128), nullable=True)
    scores = db.Column(db.Text, nullable=True)  # JSON-encoded standings
    created_at = db.Column(db.DateTime, nullable=True)
    finished_at = db.Column(db.DateTime, nullable=True)

    @classmethod
    def from_summary(cls, summary):
        return cls(
            channel_id=summary['channel_id'],
            game=summary['game'],
            outcome=summary.get('outcome') or 'finished',
            rounds_played=int(summary.get('rounds_played') or 0),
            winner_id=summary.get('winner_id'),
            scores=json.dumps(summary.get('scores') or []),
            created_at=_from_ts(summary.get('created_at')),
            finished_at=_from_ts(summary.get('finished_at')),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'channel_id': self.channel_id,
            'game': self.game,
            'outcome': self.outcome,
            'rounds_played': self.rounds_played,
            'winner_id': self.winner_id,
            'scores': json.loads(self.scores) if self.scores else [],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
        }


def _from_ts(ts):
    if ts is None:
        return None
    return datetime.fromtimestamp(float(ts), tz=timezone.utc).replace(tzinfo=None)
